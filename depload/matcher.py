# -*- coding: utf-8 -*-
"""Map host-renamed exports back to the imports that reference them.

When a DLL is loaded into a database that already defines a public name,
the new function gets a numeric suffix ("CreateFileW_12"). Dropping a purely
numeric "_<digits>" suffix recovers the original name, and every import that
starts with that name gets a repeatable "import -> CreateFileW_" comment.
"""
from dataclasses import dataclass

from .config import progress_interval as _progress_interval
from .logger import Logger

COMMENT_PREFIX = "import -> "


@dataclass(frozen=True)
class ExportCandidate:
    raw_name: str
    truncated_name: str
    was_truncated: bool


@dataclass
class MatchReport:
    exports_seen: int = 0
    candidates: int = 0
    annotated: int = 0
    overwritten: int = 0
    cancelled: bool = False


def truncate_export(name):
    """Strip a trailing _<ASCII digits> suffix.

    Foo_1234 -> Foo (truncated); Foo_12a4, Foo_ and Foo are returned as is.
    """
    base, sep, suffix = name.rpartition("_")
    if not sep or not suffix:
        return ExportCandidate(name, name, False)
    if not all("0" <= ch <= "9" for ch in suffix):
        return ExportCandidate(name, name, False)
    return ExportCandidate(name, base, True)


def match_label(candidate):
    return f"{COMMENT_PREFIX}{candidate.truncated_name}_"


class NameTruncationMatcher:
    """Annotate imports with the truncated export they most likely refer to"""
    def __init__(self, host, logger=None, progress_interval=5):
        self.host = host
        self.logger = logger or Logger(False)
        self.progress_interval = _progress_interval(progress_interval)

    def candidate_for(self, name, is_public):
        """ExportCandidate for a truncated public export, else None"""
        if not is_public or not name:
            return None
        candidate = truncate_export(name)
        # An empty prefix would match every import
        if not candidate.was_truncated or not candidate.truncated_name:
            return None
        return candidate

    def run(self, exports=None, imports_by_module=None):
        """Run one matching pass.

        exports: iterable of (ea, name, is_public); defaults to host.functions()
        imports_by_module: iterable of iterables of (ea, name_or_None, ...);
        defaults to the host import table.
        """
        if exports is None:
            exports = self.host.functions()
        exports = list(exports)
        if imports_by_module is None:
            imports_by_module = [
                self.host.import_entries(i) for i in range(len(self.host.import_modules()))
            ]
        imports = [(entry[0], entry[1]) for module in imports_by_module for entry in module if entry[1]]

        report = MatchReport()
        applied = {}
        total = len(exports)
        for index, (ea, name, is_public) in enumerate(exports):
            if index % self.progress_interval == 0:
                self.host.replace_wait_box(f"Mapping imports to exports {index:6d}/{total:6d}")
                if self.host.user_cancelled():
                    self.logger.log(f"Matching cancelled at {index}/{total}", "WARNING")
                    report.cancelled = True
                    break
            report.exports_seen += 1
            candidate = self.candidate_for(name, is_public)
            if candidate is None:
                continue
            report.candidates += 1
            label = match_label(candidate)
            prefix = candidate.truncated_name
            for import_ea, import_name in imports:
                if import_name[:len(prefix)] != prefix:
                    continue
                previous = applied.get(import_ea)
                if previous is not None and previous != label:
                    report.overwritten += 1
                    self.logger.log(
                        f"Import {import_name} (0x{import_ea:X}) matches several exports: "
                        f"{previous!r} replaced by {label!r}", "WARNING"
                    )
                self.host.set_comment(import_ea, label, True)
                applied[import_ea] = label
                report.annotated += 1

        self.logger.log(
            f"Matched {len(applied)} imports from {report.candidates} truncated exports "
            f"({report.exports_seen}/{total} exports scanned)"
        )
        return report
