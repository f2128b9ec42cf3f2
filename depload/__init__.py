# -*- coding: utf-8 -*-
"""Load DLL dependencies into an IDA database and map renamed exports to imports."""
from .codec import NOT_OURS, ORIGINAL, InvalidFilenameError, decode, encode, encode_sentinel
from .config import Config, load_config
from .loader import ALREADY_LOADED, LOAD_FAILED, LOADED, DependencyLoader, LoadResult
from .logger import Logger
from .matcher import ExportCandidate, MatchReport, NameTruncationMatcher, truncate_export
from .registry import DependencyRecord, LoadRegistry
from .session import SessionOrchestrator

__version__ = "1.0.0"
