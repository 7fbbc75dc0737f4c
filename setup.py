"""
Setup for News Sentiment Scaling.

Author: Jose Orlando Bobadilla Fuentes, CQF | MSc AI
"""
from setuptools import setup, find_packages

setup(
    name="news-sentiment-scaling",
    version="1.0.0",
    author="Jose Orlando Bobadilla Fuentes",
    description=(
        "Sentiment time series from dated news corpora using a Lexicoder-style "
        "sentiment dictionary and Latent Semantic Scaling (LSS)."
    ),
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "scipy>=1.11.0",
        "scikit-learn>=1.3.0",
        "statsmodels>=0.14.0",
        "nltk>=3.8.0",
        "matplotlib>=3.7.0",
        "tqdm>=4.65.0",
    ],
    extras_require={
        "parquet": ["pyarrow>=12.0.0"],
        "dev": ["pytest>=7.4.0"],
    },
    entry_points={
        "console_scripts": ["news-sentiment = main:main"]
    },
    keywords=[
        "sentiment-analysis", "latent-semantic-scaling", "nlp",
        "text-as-data", "lexicoder", "time-series",
    ],
)
