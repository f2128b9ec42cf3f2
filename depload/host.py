# -*- coding: utf-8 -*-
"""Boundary between the dependency loader and the analysis host.

Everything depload needs from IDA goes through a Host. IdaHost (in
ida_host.py) is the real implementation; tests use an in-memory one.
"""
import enum
import os
from collections import namedtuple


ImportSymbol = namedtuple("ImportSymbol", ["ea", "name", "ordinal"])


class LoadOptions(enum.IntFlag):
    SEGMENTS = 0x01
    RESOURCES = 0x02
    IMPORTS = 0x04
    CODE = 0x08
    # Symbol-name merge; mixes up function names when loading DLLs into
    # an existing database, so it is never requested.
    NAMES = 0x10


DEFAULT_LOAD_OPTIONS = LoadOptions.SEGMENTS | LoadOptions.RESOURCES | LoadOptions.IMPORTS | LoadOptions.CODE

# ask_choice() results
CHOICE_FILE = "file"
CHOICE_DEPENDENCIES = "dependencies"
CHOICE_CANCEL = None


class Host:
    """Analysis host interface"""

    # ---- input files / loader ----
    def open_input(self, path):
        """Return an open input stream for path, or None"""
        raise NotImplementedError

    def close_input(self, stream):
        raise NotImplementedError

    def build_loaders(self, stream, path):
        """Return a loader plan (auto-detected format), or None"""
        raise NotImplementedError

    def free_loaders(self, plan):
        raise NotImplementedError

    def load_file(self, path, stream, options, plan):
        """Load the file into the current database; returns bool"""
        raise NotImplementedError

    # ---- segments ----
    def segment_count(self):
        raise NotImplementedError

    def get_segment(self, index):
        raise NotImplementedError

    def segment_name(self, segment):
        raise NotImplementedError

    def set_segment_name(self, segment, name):
        raise NotImplementedError

    def get_segment_comment(self, segment):
        raise NotImplementedError

    def set_segment_comment(self, segment, text):
        raise NotImplementedError

    def segments(self):
        """Yield every segment that currently exists"""
        for index in range(self.segment_count()):
            segment = self.get_segment(index)
            if segment is not None:
                yield segment

    # ---- names / comments ----
    def set_comment(self, ea, text, repeatable):
        raise NotImplementedError

    def functions(self):
        """Yield (ea, name, is_public) for every function"""
        raise NotImplementedError

    def import_modules(self):
        """Return the list of import module names"""
        raise NotImplementedError

    def import_entries(self, module_index):
        """Yield ImportSymbol for every entry of one import module"""
        raise NotImplementedError

    def all_imports(self):
        for index in range(len(self.import_modules())):
            yield from self.import_entries(index)

    # ---- files ----
    def find_file(self, directory, prefix):
        """Return the first file under directory whose base name starts
        with prefix (case-insensitive), or None"""
        if not directory or not prefix:
            return None
        wanted = prefix.lower()
        for root, dirs, files in os.walk(directory):
            dirs.sort()
            for name in sorted(files):
                if name.lower().startswith(wanted):
                    return os.path.join(root, name)
        return None

    # ---- UI ----
    def ask_choice(self, question):
        """Return CHOICE_FILE, CHOICE_DEPENDENCIES or CHOICE_CANCEL"""
        raise NotImplementedError

    def ask_folder(self, default=""):
        raise NotImplementedError

    def ask_file(self, default=""):
        raise NotImplementedError

    def warning(self, text):
        raise NotImplementedError

    def show_wait_box(self, text):
        pass

    def replace_wait_box(self, text):
        pass

    def hide_wait_box(self):
        pass

    def user_cancelled(self):
        return False

    def wait_for_analysis(self):
        pass
