"""
Takein analyze layer - path metadata extraction and intake planning.

Main entry point: analyzer.analyze()
"""

from .tokenizer import (
    split_fragments,
    tokenize,
)

from .destination import (
    expand,
    resolve,
)

from .analyzer import (
    analyze,
    count_files,
    extract_paths,
    iter_files,
    parse_envs,
    preview_destination,
    today_stamp,
)

__all__ = [
    # Tokenizer
    'split_fragments',
    'tokenize',

    # Destination resolver
    'expand',
    'resolve',

    # Analyzer
    'analyze',
    'count_files',
    'extract_paths',
    'iter_files',
    'parse_envs',
    'preview_destination',
    'today_stamp',
]
