# -*- coding: utf-8 -*-
import time
from contextlib import contextmanager
from dataclasses import dataclass

from . import codec
from .host import DEFAULT_LOAD_OPTIONS
from .logger import Logger

LOADED = "loaded"
ALREADY_LOADED = "already-loaded"
LOAD_FAILED = "load-failed"

# LOAD_FAILED reasons
INVALID_FILENAME = "invalid-filename"
OPEN_FAILED = "open-failed"
DETECT_FAILED = "detect-failed"
LOAD_INTO_SESSION_FAILED = "load-into-session-failed"


class _LoadStepFailed(Exception):
    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


@dataclass
class LoadResult:
    filename: str
    outcome: str
    reason: str = None
    segments_tagged: int = 0
    warning: str = None


def display_name(filename):
    """Final path component, for either separator style"""
    return filename.replace("/", "\\").rsplit("\\", 1)[-1] or filename


class DependencyLoader:
    """Loads one dependency file into the database and tags its segments"""
    def __init__(self, host, registry, logger=None, options=DEFAULT_LOAD_OPTIONS):
        self.host = host
        self.registry = registry
        self.logger = logger or Logger(False)
        self.options = options

    @contextmanager
    def _opened(self, filename):
        stream = self.host.open_input(filename)
        if stream is None:
            raise _LoadStepFailed(OPEN_FAILED)
        try:
            yield stream
        finally:
            self.host.close_input(stream)

    @contextmanager
    def _loader_plan(self, stream, filename):
        plan = self.host.build_loaders(stream, filename)
        if plan is None:
            raise _LoadStepFailed(DETECT_FAILED)
        try:
            yield plan
        finally:
            self.host.free_loaders(plan)

    def load(self, filename):
        """Load filename unless it is already registered"""
        if self.registry.contains(filename):
            self.logger.log(f"Already loaded: {filename}")
            return LoadResult(filename, ALREADY_LOADED)

        started = time.monotonic()
        try:
            codec.check_filename(filename)
            with self._opened(filename) as stream, self._loader_plan(stream, filename) as plan:
                if not self.host.load_file(filename, stream, self.options, plan):
                    raise _LoadStepFailed(LOAD_INTO_SESSION_FAILED)
                # The file is in the database from here on
                self.registry.insert(filename)
                tagged, warning = self._tag_loaded(filename)
        except codec.InvalidFilenameError as e:
            return self._failed(filename, INVALID_FILENAME, str(e), started)
        except _LoadStepFailed as e:
            return self._failed(filename, e.reason, None, started)
        except Exception as e:
            return self._failed(filename, LOAD_INTO_SESSION_FAILED, str(e), started)

        self.logger.log(f"Loaded {filename} ({tagged} new segments)")
        self.logger.log_event(
            "load", filename=filename, outcome=LOADED, segments_tagged=tagged, warning=warning,
            duration_seconds=round(time.monotonic() - started, 2)
        )
        return LoadResult(filename, LOADED, segments_tagged=tagged, warning=warning)

    def _tag_loaded(self, filename):
        """tag_segments() for a file already in the database; errors become a warning"""
        try:
            return self.tag_segments(filename), None
        except Exception as e:
            warning = f"Loaded {filename} but failed to tag its segments: {e}"
            self.logger.log(warning, "WARNING")
            return 0, warning

    def tag_segments(self, filename):
        """Name and tag every segment that has no comment yet"""
        name = display_name(filename)
        comment = codec.encode(filename)
        tagged = 0
        for segment in self.host.segments():
            if self.host.get_segment_comment(segment):
                continue
            if self.host.segment_name(segment) is None:
                continue
            self.host.set_segment_name(segment, name)
            self.host.set_segment_comment(segment, comment)
            tagged += 1
        return tagged

    def _failed(self, filename, reason, detail, started):
        text = f"Failed to load {filename}: {reason}"
        if detail:
            text += f" ({detail})"
        self.logger.log(text, "WARNING")
        self.logger.log_event(
            "load", filename=filename, outcome=LOAD_FAILED, reason=reason,
            duration_seconds=round(time.monotonic() - started, 2)
        )
        return LoadResult(filename, LOAD_FAILED, reason=reason)
