# -*- coding: utf-8 -*-
from . import codec
from .config import Config, progress_interval
from .host import CHOICE_DEPENDENCIES, CHOICE_FILE
from .loader import ALREADY_LOADED, LOAD_FAILED, DependencyLoader
from .logger import Logger
from .matcher import NameTruncationMatcher
from .registry import LoadRegistry

CHOICE_QUESTION = "Load all current import dependencies or load a single file?\n"


class SessionOrchestrator:
    """Dependency loading workflow for one plugin invocation"""
    def __init__(self, host, registry=None, config=None, logger=None):
        self.host = host
        self.config = config or Config()
        self.logger = logger or Logger(False)
        self.registry = registry if registry is not None else LoadRegistry(self.logger)
        self.loader = DependencyLoader(host, self.registry, self.logger)
        self.matcher = NameTruncationMatcher(host, self.logger, self.config.PROGRESS_INTERVAL)

    def run(self):
        """Run the loading workflow"""
        self.logger.log("=" * 60)
        self.logger.log("Dependency loader started")
        self.logger.log("=" * 60)
        try:
            self.restore_state()

            choice = self.host.ask_choice(CHOICE_QUESTION)
            if choice == CHOICE_DEPENDENCIES:
                folder = self.host.ask_folder(self.config.DEFAULT_FOLDER)
                if not folder:
                    return
                self.load_dependencies(folder)
            elif choice == CHOICE_FILE:
                self.load_single(self.host.ask_file(self.config.DEFAULT_FOLDER))
            else:
                self.logger.log("Cancelled by user")
                return

            self.post_process()
        except Exception as e:
            self.logger.log(f"Runtime error: {e}", "ERROR")
            self.host.warning(f"Dependency loading failed: {e}")

    def restore_state(self):
        """Tag original segments and restore the registry from a previous session"""
        entries = []
        for segment in self.host.segments():
            text = self.host.get_segment_comment(segment)
            if not text:
                self.host.set_segment_comment(segment, codec.encode_sentinel())
                continue
            entries.append((text, codec.decode(text) is codec.ORIGINAL))

        restored = self.registry.reconstruct_from(entries)
        if restored:
            self.logger.log(f"Detected {restored} previous loaded files")
            self.list_loaded()
        return restored

    def load_dependencies(self, folder):
        """Load a file from folder for every import module"""
        modules = self.host.import_modules()
        results = []
        interval = progress_interval(self.config.PROGRESS_INTERVAL)
        self.host.show_wait_box("Loading dependencies")
        try:
            for index, module in enumerate(modules):
                if index % interval == 0:
                    self.host.replace_wait_box(f"Loading dependencies {index:4d}/{len(modules):4d}\n{module}")
                    if self.host.user_cancelled():
                        self.logger.log(f"Batch loading cancelled at {index}/{len(modules)}", "WARNING")
                        break
                path = self.host.find_file(folder, module)
                if not path:
                    self.logger.log(f"No file found for import '{module}'", "WARNING")
                    self.host.warning(f"Cannot find resource for import '{module}'\nIgnoring.\n")
                    continue
                result = self.loader.load(path)
                if result.outcome == LOAD_FAILED:
                    self.host.warning(f"Failed to load file '{path}'\n")
                elif result.warning:
                    self.host.warning(result.warning)
                results.append(result)
        finally:
            self.host.hide_wait_box()
        return results

    def load_single(self, path):
        if not path:
            return None
        result = self.loader.load(path)
        if result.outcome == LOAD_FAILED:
            self.host.warning("Failed to load file\n")
        elif result.outcome == ALREADY_LOADED:
            self.host.warning("File is already loaded\n")
        elif result.warning:
            self.host.warning(result.warning)
        return result

    def clear_import_comments(self):
        """Wipe repeatable comments on every import entry.

        Loading without symbol-name merging leaves long multi-line
        repeatable comments on the import table.
        """
        cleared = 0
        for entry in self.host.all_imports():
            self.host.set_comment(entry.ea, "", True)
            cleared += 1
        return cleared

    def list_loaded(self):
        self.logger.log("--------------------------")
        self.logger.log("Currently loaded files:")
        self.logger.log("--------------------------")
        for filename in self.registry.enumerate():
            self.logger.log(f">>>> '{filename}'")

    def post_process(self):
        if self.config.CLEAR_IMPORT_COMMENTS:
            self.clear_import_comments()
        self.list_loaded()

        self.host.show_wait_box("Please wait for autoanalysis to finish")
        try:
            if self.config.WAIT_FOR_ANALYSIS:
                self.host.wait_for_analysis()
            report = self.matcher.run()
        finally:
            self.host.hide_wait_box()
        self.logger.log("All done")
        return report
