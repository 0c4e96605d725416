"""
Topic modeling for the news corpus.
"""

import logging
from typing import Dict, Any, List, Tuple

import numpy as np
import pandas as pd
from gensim.matutils import Sparse2Corpus, corpus2dense
from gensim.models import LdaModel
from scipy import sparse
from sklearn.decomposition import LatentDirichletAllocation, NMF
from tqdm import tqdm

from ..errors import EmptyAnalysisInputError, ModelFitFailureError
from ..models import TopicModelResult
from .utils import top_n_by_group

# Configure logger
logger = logging.getLogger(__name__)

DEFAULT_TOPIC_LABELS = {
    1: "Strukturwandel",
    2: "Gastronomie",
    3: "Kultur/Zukunft, Esch 2022",
    4: "Stadtentwicklung",
    5: "Events",
    6: "Campus Belval",
}

SUPPORTED_ALGORITHMS = ('nmf', 'lda', 'gensim_lda')


def print_important(message, symbol='='):
    """Displays a prominent message in the terminal."""
    border = symbol * 80
    tqdm.write(f"\n{border}\n{message}\n{border}\n")


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """Scale rows to sum to one; all-zero rows become uniform."""
    matrix = np.asarray(matrix, dtype=float)
    totals = matrix.sum(axis=1, keepdims=True)
    uniform = np.full_like(matrix, 1.0 / matrix.shape[1])
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.where(totals > 0, matrix / totals, uniform)


class TopicModeler:
    """Class for fitting a fixed-K topic model on the token table."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.algorithm = config.get('algorithm', 'nmf')
        self.num_topics = int(config.get('num_topics', 6))
        self.random_state = config.get('random_state', 1994)
        self.init = config.get('init', 'nndsvd')
        self.max_iter = config.get('max_iter', 500)
        self.passes = config.get('passes', 20)
        self.n_terms = config.get('n_terms', 10)
        self.dominant_threshold = config.get('dominant_threshold', 0.5)
        self.labels = {int(k): str(v) for k, v in config.get('topic_labels', DEFAULT_TOPIC_LABELS).items()}
        self.model = None

        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported algorithm: {self.algorithm}")
        if self.num_topics < 1:
            raise ValueError(f"num_topics must be positive, got {self.num_topics}")
        missing = [t for t in range(1, self.num_topics + 1) if not self.labels.get(t, '').strip()]
        if missing:
            raise ValueError(f"No label configured for topic(s) {missing}")

    def build_document_term_matrix(self, tokens: pd.DataFrame) -> Tuple[sparse.csr_matrix, List[str], List[str]]:
        """
        Build the document-term count matrix, one row per article title.

        Returns:
            (matrix, document names in order of first appearance, sorted vocabulary)
        """
        if tokens is None or tokens.empty:
            raise EmptyAnalysisInputError("Cannot build a document-term matrix from an empty token table")

        documents = list(pd.unique(tokens['title']))
        vocabulary = sorted(tokens['word'].unique())
        rows = pd.Categorical(tokens['title'], categories=documents).codes
        cols = pd.Categorical(tokens['word'], categories=vocabulary).codes
        data = np.ones(len(tokens), dtype=np.int64)
        # duplicate (row, col) entries are summed into counts
        dtm = sparse.csr_matrix((data, (rows, cols)), shape=(len(documents), len(vocabulary)))
        logger.info(f"Document-term matrix: {dtm.shape[0]} documents x {dtm.shape[1]} terms")
        return dtm, documents, vocabulary

    def fit(self, tokens: pd.DataFrame) -> TopicModelResult:
        """
        Fit the topic model and return tidy beta and gamma tables.

        Args:
            tokens: Normalized token table

        Returns:
            TopicModelResult with labelled topics
        """
        dtm, documents, vocabulary = self.build_document_term_matrix(tokens)

        if self.num_topics > len(vocabulary):
            raise ModelFitFailureError(
                f"Cannot fit {self.num_topics} topics on a vocabulary of {len(vocabulary)} terms")
        if self.num_topics > len(documents):
            raise ModelFitFailureError(
                f"Cannot fit {self.num_topics} topics on {len(documents)} documents")

        print_important(f"TRAINING {self.algorithm.upper()} TOPIC MODEL\n"
                        f"TOPICS: {self.num_topics} - DOCUMENTS: {len(documents)} - TERMS: {len(vocabulary)}")
        try:
            if self.algorithm == 'nmf':
                doc_topic, topic_term = self._fit_nmf(dtm)
            elif self.algorithm == 'lda':
                doc_topic, topic_term = self._fit_sklearn_lda(dtm)
            else:
                doc_topic, topic_term = self._fit_gensim_lda(dtm, vocabulary)
        except (ValueError, ArithmeticError, np.linalg.LinAlgError) as e:
            raise ModelFitFailureError(f"{self.algorithm} topic model failed to fit: {e}") from e

        beta = _normalize_rows(topic_term)
        gamma = _normalize_rows(doc_topic)
        if not (np.isfinite(beta).all() and np.isfinite(gamma).all()):
            raise ModelFitFailureError(f"{self.algorithm} topic model produced non-finite weights")

        result = TopicModelResult(
            beta=self._tidy_beta(beta, vocabulary),
            gamma=self._tidy_gamma(gamma, documents),
            num_topics=self.num_topics,
            algorithm=self.algorithm,
            labels=dict(self.labels),
        )
        logger.info(f"Topic model fitted: {self.num_topics} topics ({self.algorithm})")
        return result

    def _fit_nmf(self, dtm: sparse.csr_matrix) -> Tuple[np.ndarray, np.ndarray]:
        self.model = NMF(n_components=self.num_topics, init=self.init,
                         random_state=self.random_state, max_iter=self.max_iter)
        doc_topic = self.model.fit_transform(dtm.astype(float))
        return doc_topic, self.model.components_

    def _fit_sklearn_lda(self, dtm: sparse.csr_matrix) -> Tuple[np.ndarray, np.ndarray]:
        self.model = LatentDirichletAllocation(n_components=self.num_topics, learning_method='batch',
                                               max_iter=self.max_iter, random_state=self.random_state)
        doc_topic = self.model.fit_transform(dtm)
        return doc_topic, self.model.components_

    def _fit_gensim_lda(self, dtm: sparse.csr_matrix, vocabulary: List[str]) -> Tuple[np.ndarray, np.ndarray]:
        corpus = Sparse2Corpus(dtm, documents_columns=False)
        id2word = dict(enumerate(vocabulary))
        self.model = LdaModel(corpus, num_topics=self.num_topics, id2word=id2word,
                              passes=self.passes, random_state=self.random_state)
        doc_topic = corpus2dense(self.model.get_document_topics(corpus, minimum_probability=0.0),
                                 num_terms=self.num_topics).T
        return doc_topic, self.model.get_topics()

    def _tidy_beta(self, beta: np.ndarray, vocabulary: List[str]) -> pd.DataFrame:
        df = pd.DataFrame({
            'topic': np.repeat(np.arange(1, self.num_topics + 1), len(vocabulary)),
            'term': np.tile(np.asarray(vocabulary, dtype=object), self.num_topics),
            'beta': beta.ravel(),
        })
        df['label'] = df['topic'].map(self.labels)
        return df

    def _tidy_gamma(self, gamma: np.ndarray, documents: List[str]) -> pd.DataFrame:
        df = pd.DataFrame({
            'document': np.tile(np.asarray(documents, dtype=object), self.num_topics),
            'topic': np.repeat(np.arange(1, self.num_topics + 1), len(documents)),
            'gamma': gamma.T.ravel(),
        })
        df['label'] = df['topic'].map(self.labels)
        return df

    def top_terms(self, result: TopicModelResult, n: int = None) -> pd.DataFrame:
        """Highest-weighted terms of every topic (ties included)."""
        return top_n_by_group(result.beta, 'topic', 'beta', n or self.n_terms)

    def dominant_topics(self, result: TopicModelResult, tokens: pd.DataFrame,
                        threshold: float = None) -> pd.DataFrame:
        """
        Assign each article to the topic whose proportion exceeds the threshold.

        Returns:
            DataFrame (title, year, topic, label, gamma) sorted by topic then year
        """
        threshold = self.dominant_threshold if threshold is None else threshold
        dominant = result.gamma[result.gamma['gamma'] > threshold].rename(columns={'document': 'title'})
        years = tokens[['title', 'year']].drop_duplicates()
        assignments = years.merge(dominant, on='title', how='inner')
        assignments = assignments[['title', 'year', 'topic', 'label', 'gamma']]
        logger.info(f"{len(assignments)} of {years['title'].nunique()} articles have a dominant topic "
                    f"(gamma > {threshold})")
        return assignments.sort_values(['topic', 'year'], kind='stable').reset_index(drop=True)

    def topics_over_time(self, assignments: pd.DataFrame) -> pd.DataFrame:
        """Number of articles per (year, topic label), sorted by n descending."""
        counts = assignments.groupby(['year', 'label']).size().reset_index(name='n')
        return counts.sort_values('n', ascending=False, kind='stable').reset_index(drop=True)
