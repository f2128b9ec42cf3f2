#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""IDA entry point: copy next to the depload package into IDA's plugins
directory, or run it with File > Script file."""
import ida_idaapi

from depload import LoadRegistry, Logger, SessionOrchestrator, load_config
from depload.ida_host import IdaHost


class depload_plugin_t(ida_idaapi.plugin_t):
    flags = 0
    wanted_name = "depload"
    comment = "Load import dependencies into the database"
    wanted_hotkey = ""
    help = ""

    def init(self):
        # Registry outlives single runs; rebuilt from segment comments each time
        self.registry = LoadRegistry()
        return ida_idaapi.PLUGIN_OK

    def run(self, arg):
        run_session(self.registry)
        return True

    def term(self):
        self.registry.clear()


def run_session(registry=None):
    config = load_config()
    logger = Logger(
        config.LOG_ENABLED,
        config.LOG_FILE,
        config.EVENT_LOG_FILE,
        console_quiet=config.CONSOLE_QUIET
    )
    try:
        if registry is not None:
            registry.logger = logger
        SessionOrchestrator(IdaHost(), registry, config, logger).run()
    finally:
        logger.close()


def PLUGIN_ENTRY():
    return depload_plugin_t()


def main():
    """Main entry point"""
    print("\n" + "=" * 60)
    print("depload - import dependency loader")
    print("=" * 60 + "\n")

    run_session()


if __name__ == "__main__":
    main()
