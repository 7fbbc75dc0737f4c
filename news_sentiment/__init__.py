"""
News Sentiment Scaling
======================
Sentiment time series from a dated news corpus using a fixed
sentiment dictionary and Latent Semantic Scaling.

Modules:
    corpus                  - Corpus loading, sentence reshaping, synthetic news
    features                - Tokenization and document-feature matrices
    keyness                 - Context-window keyness for candidate vocabulary
    models.lsd_dictionary   - Lexicoder-style dictionary sentiment scoring
    models.lss              - Latent Semantic Scaling with seed words
    series                  - Date alignment and LOWESS smoothing
    visualization           - Comparison and term plots

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
"""

__version__ = "1.0.0"
__author__ = "Jose Orlando Bobadilla Fuentes"
