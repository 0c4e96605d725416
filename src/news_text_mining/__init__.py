"""
Exploratory text mining of a small news corpus: parsing, normalization,
word frequencies, TF-IDF and topic modeling.
"""

__version__ = "0.1.0"
