#!/usr/bin/env python3
"""
Main script for the news corpus text mining analysis.

Parses the structured corpus file, normalizes it into a token table and runs the
word cloud, articles-per-year, TF-IDF and topic model analyses, writing one
figure per analysis plus the table of dominant topics per article.
"""

import os
import sys
import argparse
import logging
from typing import Dict, Any, Optional

from .utils.config_loader import load_config, resolve_paths
from .preprocessing.data_loader import CorpusLoader
from .preprocessing.text_cleaner import TextCleaner
from .analysis.lexical_analysis import (
    count_words,
    top_words,
    count_articles_by_year,
    compute_tf_idf,
    top_tf_idf_by_year,
)
from .analysis.topic_modeling import TopicModeler, print_important
from .errors import TextMiningError

logger = logging.getLogger('news_text_mining')


def setup_logging(config: Dict[str, Any]):
    """
    Set up logging based on configuration.

    Args:
        config: Logging configuration
    """
    log_level = getattr(logging, config.get('level', 'INFO'))
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(level=log_level, format=log_format)

    if config.get('log_to_file', False):
        log_file = config.get('log_file', 'text_mining.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(log_format))
        logging.getLogger().addHandler(file_handler)

    return logger


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='News Corpus Text Mining')

    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--corpus-file', type=str,
                        help='Structured corpus text file (overrides config)')
    parser.add_argument('--output-dir', type=str,
                        help='Directory for figures and tables (overrides config)')
    parser.add_argument('--skip-wordcloud', action='store_true',
                        help='Skip word cloud')
    parser.add_argument('--skip-tfidf', action='store_true',
                        help='Skip TF-IDF analysis')
    parser.add_argument('--skip-topic-modeling', action='store_true',
                        help='Skip topic modeling step')
    parser.add_argument('--skip-visualization', action='store_true',
                        help='Compute the tables without drawing figures')

    return parser.parse_args(argv)


def run_analysis(config: Dict[str, Any],
                 skip_wordcloud: bool = False,
                 skip_tfidf: bool = False,
                 skip_topic_modeling: bool = False,
                 skip_visualization: bool = False,
                 text_cleaner: Optional[TextCleaner] = None) -> Dict[str, Any]:
    """
    Run the full analysis pipeline.

    Args:
        config: Complete configuration
        skip_wordcloud: Do not compute the word cloud
        skip_tfidf: Do not compute the TF-IDF ranking
        skip_topic_modeling: Do not fit the topic model
        skip_visualization: Compute tables only
        text_cleaner: Preconfigured normalizer, built from config when omitted

    Returns:
        Dictionary with the computed tables under 'tables' and the saved
        figure paths under 'figures'
    """
    data_config = config.get('data', {})
    analysis_config = config.get('analysis', {})
    lexical_config = analysis_config.get('lexical', {})
    figures_dir = data_config.get('figures_dir', 'results/figures')

    visualizer = None
    if not skip_visualization:
        from .visualization.visualizer import Visualizer
        visualizer = Visualizer(config.get('visualization', {}))

    tables = {}
    figures = {}

    def save(fig, name):
        figures[name] = visualizer.save_figure(fig, figures_dir, name)
        logger.info(f"Saved figure {figures[name]}")

    print_important("STAGE 1/3: PARSING CORPUS")
    loader = CorpusLoader(data_config)
    lines = loader.load_corpus()
    tables['lines'] = lines

    print_important("STAGE 2/3: NORMALIZING WORDS")
    cleaner = text_cleaner or TextCleaner(config.get('preprocessing', {}))
    tokens = cleaner.normalize(lines)
    tables['tokens'] = tokens

    print_important("STAGE 3/3: ANALYSIS")
    word_counts = count_words(tokens)
    tables['word_counts'] = word_counts
    logger.info("Most frequent words: " + ', '.join(
        f"{w} ({n})" for w, n in word_counts.head(10).itertuples(index=False)))

    if not skip_wordcloud and visualizer:
        frequencies = top_words(word_counts,
                                max_words=lexical_config.get('wordcloud_max_words', 200),
                                min_freq=lexical_config.get('wordcloud_min_freq', 1))
        save(visualizer.create_wordcloud(frequencies, max_words=len(frequencies) or 1), 'wordcloud')

    articles_per_year = count_articles_by_year(tokens)
    tables['articles_per_year'] = articles_per_year
    if visualizer:
        save(visualizer.plot_articles_per_year(articles_per_year), 'articles_per_year')

    if not skip_tfidf:
        tf_idf = compute_tf_idf(tokens)
        top_tf_idf = top_tf_idf_by_year(tf_idf, n=lexical_config.get('tf_idf_top_n', 10))
        tables['tf_idf'] = tf_idf
        tables['top_tf_idf'] = top_tf_idf
        if visualizer:
            save(visualizer.plot_faceted_bars(top_tf_idf, facet='year', term='word', value='tf_idf',
                                              xlabel='Term Frequency - Inverse Document Frequency (TF-IDF)'),
                 'tf_idf_by_year')

    if not skip_topic_modeling:
        modeler = TopicModeler(analysis_config.get('topic_modeling', {}))
        result = modeler.fit(tokens)
        top_terms = modeler.top_terms(result)
        assignments = modeler.dominant_topics(result, tokens)
        over_time = modeler.topics_over_time(assignments)
        tables.update({
            'beta': result.beta,
            'gamma': result.gamma,
            'top_terms': top_terms,
            'topic_assignments': assignments,
            'topics_over_time': over_time,
        })
        tables['topic_model'] = result
        loader.save_as_csv(assignments, 'topic_assignments.csv')

        for label, terms in top_terms.groupby('label', sort=False)['term']:
            logger.info(f"Topic '{label}': {', '.join(terms)}")

        if visualizer:
            save(visualizer.plot_faceted_bars(top_terms, facet='label', term='term', value='beta',
                                              xlabel='Beta'), 'topic_terms')
            save(visualizer.plot_gamma_histograms(result.gamma), 'topic_gamma')
            if over_time.empty:
                logger.warning("No article has a dominant topic, skipping the topics over time chart")
            else:
                save(visualizer.plot_topics_over_time(over_time), 'topics_over_time')

    return {'tables': tables, 'figures': figures}


def main(argv=None):
    """Main function to run the text mining pipeline."""
    args = parse_arguments(argv)

    try:
        config = resolve_paths(load_config(args.config))
    except FileNotFoundError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Analysis aborted: {e}")
        return 1
    setup_logging(config.get('logging', {}))

    data_config = config.setdefault('data', {})
    if args.corpus_file:
        data_config['corpus_file'] = args.corpus_file
    if args.output_dir:
        data_config['figures_dir'] = os.path.join(args.output_dir, 'figures')
        data_config['processed_dir'] = os.path.join(args.output_dir, 'tables')

    try:
        outputs = run_analysis(config,
                               skip_wordcloud=args.skip_wordcloud,
                               skip_tfidf=args.skip_tfidf,
                               skip_topic_modeling=args.skip_topic_modeling,
                               skip_visualization=args.skip_visualization)
    except (TextMiningError, FileNotFoundError) as e:
        logger.error(f"Analysis aborted: {e}")
        return 1

    logger.info(f"Analysis complete, {len(outputs['figures'])} figures written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
