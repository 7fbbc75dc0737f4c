"""
Sentiment Models
================
Lexicoder-style dictionary scoring and Latent Semantic Scaling.
"""

from news_sentiment.models.lsd_dictionary import (
    LSD2015, DictionarySentiment, SentimentDictionary,
)
from news_sentiment.models.lss import LatentSemanticScaling, weight_seeds

__all__ = [
    "LSD2015", "DictionarySentiment", "SentimentDictionary",
    "LatentSemanticScaling", "weight_seeds",
]
