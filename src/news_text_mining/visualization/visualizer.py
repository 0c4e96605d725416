"""
Visualization utilities for the news corpus analysis.
"""

import math
import os
from typing import Dict, Any, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import seaborn as sns
from wordcloud import WordCloud


class Visualizer:
    """Class for creating visualizations of the corpus analysis."""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the Visualizer with configuration settings.

        Args:
            config: Dictionary containing visualization configuration
        """
        self.config = config
        self.figsize = tuple(config.get('default_figsize', (12, 8)))
        self.dpi = config.get('dpi', 300)
        self.save_format = config.get('save_format', 'png')
        self.color_palette = config.get('color_palette', 'Dark2')
        self.bar_color = config.get('bar_color', '#69b3a2')
        self.facet_columns = config.get('facet_columns', 3)

        # Set default style
        sns.set_style('whitegrid')
        plt.rcParams['figure.figsize'] = self.figsize
        plt.rcParams['figure.dpi'] = self.dpi

        # Set color palette
        sns.set_palette(self.color_palette)

    def create_wordcloud(self, frequencies: Dict[str, int],
                         title: Optional[str] = None,
                         max_words: int = 200) -> Figure:
        """
        Create a word cloud from word frequencies.

        Args:
            frequencies: Dictionary mapping words to counts
            title: Optional title for the visualization
            max_words: Maximum number of words drawn

        Returns:
            Matplotlib figure
        """
        wordcloud = WordCloud(
            width=800,
            height=800,
            background_color='white',
            max_words=max_words,
            prefer_horizontal=0.7,
            relative_scaling=0.5,
            colormap=self.color_palette,
            random_state=1,
        ).generate_from_frequencies(frequencies)

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.imshow(wordcloud, interpolation='bilinear')
        ax.set_axis_off()
        if title:
            ax.set_title(title, fontsize=16)

        return fig

    def plot_articles_per_year(self, counts: pd.DataFrame,
                               ylabel: str = 'Number of Articles') -> Figure:
        """
        Create a bar chart of the number of articles per year.

        Args:
            counts: DataFrame with columns year and n
            ylabel: Label for y-axis

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.figsize)

        ax.bar(counts['year'], counts['n'], color=self.bar_color)
        ax.set_xticks(np.arange(counts['year'].min(), counts['year'].max() + 1))
        ax.set_xlabel('')
        ax.set_ylabel(ylabel, fontsize=17)
        ax.tick_params(labelsize=12)

        plt.tight_layout()
        return fig

    def plot_faceted_bars(self, df: pd.DataFrame, facet: str, term: str, value: str,
                          xlabel: str, facet_title: str = '{}') -> Figure:
        """
        Create one horizontal bar chart per facet, bars sorted by value.

        Used for the top TF-IDF words per year and the top terms per topic.

        Args:
            df: Long table with facet, term and value columns
            facet: Column defining the panels
            term: Column with the bar labels
            value: Column with the bar lengths
            xlabel: Label for the value axis
            facet_title: Format string for the panel titles

        Returns:
            Matplotlib figure
        """
        facets = list(pd.unique(df[facet].sort_values()))
        ncols = min(self.facet_columns, max(len(facets), 1))
        nrows = max(math.ceil(len(facets) / ncols), 1)
        colors = sns.color_palette(self.color_palette, max(len(facets), 1))

        fig, axes = plt.subplots(nrows, ncols, figsize=(5 * ncols, 4 * nrows), squeeze=False)
        for i, key in enumerate(facets):
            ax = axes[i // ncols][i % ncols]
            panel = df[df[facet] == key].sort_values(value)
            positions = np.arange(len(panel))
            ax.barh(positions, panel[value], color=colors[i])
            ax.set_yticks(positions)
            ax.set_yticklabels(panel[term].astype(str))
            ax.set_title(facet_title.format(key))
            ax.set_xlabel(xlabel)
            ax.margins(x=0.1)
        for j in range(len(facets), nrows * ncols):
            axes[j // ncols][j % ncols].set_visible(False)

        plt.tight_layout()
        return fig

    def plot_gamma_histograms(self, gamma: pd.DataFrame, bins: int = 30) -> Figure:
        """
        Histogram of the document-topic proportions of every topic.

        Args:
            gamma: DataFrame with columns topic, label and gamma
            bins: Number of histogram bins

        Returns:
            Matplotlib figure
        """
        labels = list(pd.unique(gamma.sort_values('topic', kind='stable')['label']))
        ncols = min(self.facet_columns, max(len(labels), 1))
        nrows = max(math.ceil(len(labels) / ncols), 1)
        colors = sns.color_palette(self.color_palette, max(len(labels), 1))

        fig, axes = plt.subplots(nrows, ncols, figsize=(5 * ncols, 4 * nrows),
                                 sharex=True, sharey=True, squeeze=False)
        for i, label in enumerate(labels):
            ax = axes[i // ncols][i % ncols]
            ax.hist(gamma.loc[gamma['label'] == label, 'gamma'], bins=bins, range=(0, 1), color=colors[i])
            ax.set_title(label)
            ax.set_xlabel('Gamma')
        for j in range(len(labels), nrows * ncols):
            axes[j // ncols][j % ncols].set_visible(False)

        plt.tight_layout()
        return fig

    def plot_topics_over_time(self, counts: pd.DataFrame,
                              ylabel: str = 'Number of Articles') -> Figure:
        """
        Create a stacked bar chart of dominant topics per year.

        Args:
            counts: DataFrame with columns year, label and n
            ylabel: Label for y-axis

        Returns:
            Matplotlib figure
        """
        df = counts.pivot_table(index='year', columns='label', values='n', aggfunc='sum', fill_value=0)
        # Largest topics at the bottom of the stack
        df = df[df.sum().sort_values(ascending=False).index]
        df = df.reindex(range(int(df.index.min()), int(df.index.max()) + 1), fill_value=0)

        fig, ax = plt.subplots(figsize=self.figsize)
        df.plot(kind='bar', stacked=True, ax=ax, colormap=self.color_palette, width=0.9, rot=0)

        ax.set_xlabel('')
        ax.set_ylabel(ylabel)
        ax.legend(title='Topic', bbox_to_anchor=(1.05, 1), loc='upper left')

        plt.tight_layout()
        return fig

    def save_figure(self, fig: Figure, output_dir: str, filename: str) -> str:
        """
        Save a figure to file.

        Args:
            fig: Matplotlib figure
            output_dir: Directory to save the figure
            filename: Filename for the figure (without extension)

        Returns:
            Path to the saved figure
        """
        if not os.path.exists(output_dir):
            os.makedirs(output_dir)

        # Add extension if not present
        if not filename.endswith(f'.{self.save_format}'):
            filename = f"{filename}.{self.save_format}"

        output_path = os.path.join(output_dir, filename)

        fig.savefig(output_path, dpi=self.dpi, bbox_inches='tight')
        plt.close(fig)

        return output_path
