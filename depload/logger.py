# -*- coding: utf-8 -*-
import json
import os
import time


# Console lines that are still printed when CONSOLE_QUIET is on
IMPORTANT_PREFIXES = (
    "Dependency loader",
    "Detected",
    "Currently loaded files",
    "-----",
    ">>>>",
    "Loaded",
    "Matched",
    "All done",
)


class Logger:
    """Logger"""
    def __init__(self, enabled=True, log_file=None, event_log_file=None, console_quiet=True):
        self.enabled = enabled
        self.log_file = None
        self.console_quiet = console_quiet
        self.event_log_path = event_log_file
        if enabled and log_file:
            try:
                self.log_file = open(log_file, 'w', encoding='utf-8')
                self.log(f"Log file created: {os.path.abspath(log_file)}")
                if event_log_file:
                    open(event_log_file, 'w', encoding='utf-8').close()
                    self.log(f"Event log: {os.path.abspath(event_log_file)}")
            except OSError as e:
                print(f"Failed to create log file: {e}")

    def log(self, message, level="INFO"):
        """Write log message"""
        if not self.enabled:
            return

        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        log_msg = f"[{timestamp}] [{level}] {message}"

        should_print = True
        if self.console_quiet and level not in ["ERROR", "WARNING"]:
            should_print = message.startswith(IMPORTANT_PREFIXES)
        if should_print:
            print(log_msg)
        if self.log_file:
            try:
                self.log_file.write(log_msg + "\n")
                self.log_file.flush()
            except (OSError, ValueError):
                pass

    def log_event(self, event, **fields):
        """Append one JSON record to the event log"""
        if not self.enabled or not self.event_log_path:
            return
        record = {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "event": event,
        }
        record.update(fields)
        try:
            with open(self.event_log_path, 'a', encoding='utf-8') as f:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
        except OSError:
            # Event log failures never affect the workflow
            pass

    def close(self):
        """Close log file"""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
