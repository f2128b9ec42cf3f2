import pytest

from depload.host import CHOICE_CANCEL, Host, ImportSymbol
from depload.logger import Logger
from depload.registry import LoadRegistry


class FakeSegment:
    def __init__(self, name, comment=None):
        self.name = name
        self.comment = comment

    def __repr__(self):
        return f"FakeSegment({self.name!r}, {self.comment!r})"


class FakeHost(Host):
    """In-memory database used instead of IDA"""
    def __init__(self):
        self.segs = []
        # path -> segment names created by loading it
        self.files = {}
        self.unopenable = set()
        self.undetectable = set()
        self.unloadable = set()
        self.load_calls = []
        self.open_streams = []
        self.live_plans = []
        self.exports = []
        self.modules = []  # [(module_name, [ImportSymbol, ...])]
        self.comments = {}  # ea -> (text, repeatable)
        self.comment_log = []
        self.choice = CHOICE_CANCEL
        self.folder = None
        self.file = None
        self.found = {}  # module prefix -> path
        self.warnings = []
        self.wait_box = []
        self.cancel_after = None
        self.cancel_checks = 0
        self.analysis_waits = 0

    def open_input(self, path):
        if path in self.unopenable or path not in self.files:
            return None
        stream = object()
        self.open_streams.append(stream)
        return stream

    def close_input(self, stream):
        self.open_streams.remove(stream)

    def build_loaders(self, stream, path):
        if path in self.undetectable:
            return None
        plan = object()
        self.live_plans.append(plan)
        return plan

    def free_loaders(self, plan):
        self.live_plans.remove(plan)

    def load_file(self, path, stream, options, plan):
        self.load_calls.append((path, options))
        if path in self.unloadable:
            return False
        for name in self.files[path]:
            self.segs.append(FakeSegment(name))
        return True

    def segment_count(self):
        return len(self.segs)

    def get_segment(self, index):
        return self.segs[index]

    def segment_name(self, segment):
        return segment.name

    def set_segment_name(self, segment, name):
        segment.name = name

    def get_segment_comment(self, segment):
        return segment.comment

    def set_segment_comment(self, segment, text):
        segment.comment = text

    def set_comment(self, ea, text, repeatable):
        self.comments[ea] = (text, repeatable)
        self.comment_log.append((ea, text))

    def functions(self):
        return iter(self.exports)

    def import_modules(self):
        return [name for name, _ in self.modules]

    def import_entries(self, module_index):
        return list(self.modules[module_index][1])

    def find_file(self, directory, prefix):
        return self.found.get(prefix)

    def ask_choice(self, question):
        return self.choice

    def ask_folder(self, default=""):
        return self.folder

    def ask_file(self, default=""):
        return self.file

    def warning(self, text):
        self.warnings.append(text)

    def show_wait_box(self, text):
        self.wait_box.append(("show", text))

    def replace_wait_box(self, text):
        self.wait_box.append(("replace", text))

    def hide_wait_box(self):
        self.wait_box.append(("hide", None))

    def user_cancelled(self):
        self.cancel_checks += 1
        return self.cancel_after is not None and self.cancel_checks > self.cancel_after

    def wait_for_analysis(self):
        self.analysis_waits += 1


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def registry():
    return LoadRegistry(Logger(False))


def imp(ea, name, ordinal=0):
    return ImportSymbol(ea, name, ordinal)
