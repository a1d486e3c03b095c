#!/usr/bin/env python3
"""
Debug Logger for ARCH

One log file per workspace session with the calling file:line on every record, a JSONL
trail of every facility generation call and a record of project exports:

    logs/session/<session>.log              human-readable session log
    logs/session/<session>_summary.json     written by finalize_session()
    logs/llm/<session>.jsonl                one line per generation call
    logs/project/<session>_exports.jsonl    one line per exported project
"""

import logging
import json
import os
import sys
import inspect
from datetime import datetime
from typing import Dict, Any
from pathlib import Path


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
PACKAGE_DIR = 'research_architect'


class DebugLogger:
    """Session logger for facility runs"""

    def __init__(self, debug_mode: bool = False, log_dir: str = "logs", project_title: str = None):
        self.debug_mode = debug_mode
        self.project_title = project_title
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")

        root = Path(log_dir)
        self.session_log_dir = root / "session"
        self.llm_log_dir = root / "llm"
        self.project_log_dir = root / "project"
        for directory in (self.session_log_dir, self.llm_log_dir, self.project_log_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self.main_log_file = self.session_log_dir / f"{self.session_id}.log"
        self.llm_log_file = self.llm_log_dir / f"{self.session_id}.jsonl"
        self.export_log_file = self.project_log_dir / f"{self.session_id}_exports.jsonl"

        self.llm_counters: Dict[str, int] = {}
        self.component_states: Dict[str, Dict[str, Any]] = {}
        self.exported_files = []

        # Two sessions opened within the same second still get separate loggers
        self.logger = logging.getLogger(f"{PACKAGE_DIR}.{self.session_id}.{id(self)}")
        self.logger.propagate = False
        self._attach_handlers()

        self.logger.info(f"Session {self.session_id} started (project: {project_title or '-'}, debug: {debug_mode})")
        self.logger.info(f"Writing to {self.main_log_file}")

    def _attach_handlers(self):
        self.logger.setLevel(logging.DEBUG if self.debug_mode else logging.INFO)
        self.logger.handlers.clear()
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        file_handler = logging.FileHandler(self.main_log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

        # Console only in debug mode, and only for warnings and errors
        if self.debug_mode:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.WARNING)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

    @staticmethod
    def _caller() -> str:
        """file:line of the first frame outside this module"""
        this_file = os.path.abspath(__file__)
        frame = inspect.currentframe()
        try:
            while frame and os.path.abspath(frame.f_code.co_filename) == this_file:
                frame = frame.f_back
            if frame is None:
                return "unknown:0"
            path = frame.f_code.co_filename
            marker = os.sep + PACKAGE_DIR + os.sep
            location = PACKAGE_DIR + os.sep + path.split(marker)[-1] if marker in path else os.path.basename(path)
            return f"{location}:{frame.f_lineno}"
        finally:
            del frame

    def _emit(self, level: int, message: str, component: str):
        self.logger.log(level, f"[{self._caller()}] [{component}] {message}")

    def log_info(self, message: str, component: str = "main_system"):
        self._emit(logging.INFO, message, component)

    def log_debug(self, message: str, component: str = "main_system"):
        if self.debug_mode:
            self._emit(logging.DEBUG, message, component)

    def log_warning(self, message: str, component: str = "main_system"):
        self._emit(logging.WARNING, message, component)

    def log_error(self, message: str, component: str = "main_system", exception: Exception = None):
        if exception is not None:
            message = f"{message} - {type(exception).__name__}: {exception}"
        self._emit(logging.ERROR, message, component)

    @staticmethod
    def _append_jsonl(path: Path, record: Dict[str, Any]):
        with open(path, 'a', encoding='utf-8') as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + '\n')

    def log_llm_conversation(self, facility: str, prompt: str, response: str,
                             metadata: Dict[str, Any] = None):
        """Append one generation call to the session's LLM trail"""
        metadata = metadata or {}
        counter = self.llm_counters.get(facility, 0) + 1
        self.llm_counters[facility] = counter

        self._append_jsonl(self.llm_log_file, {
            "session_id": self.session_id,
            "project_title": self.project_title,
            "facility": facility,
            "conversation_number": counter,
            "timestamp": datetime.now().isoformat(),
            "caller": self._caller(),
            "prompt": prompt,
            "response": response,
            "word_counts": {"prompt": len(prompt.split()), "response": len(response.split())},
            "metadata": metadata,
        })

        cost_info = metadata.get("cost_info")
        cost = f", cost ${cost_info['costs_usd']['total_cost']:.6f}" if cost_info else ""
        self.log_info(f"{facility} call #{counter}: {len(response)} chars{cost}", "llm_interface")

    def log_component_state(self, component: str, state: Dict[str, Any]):
        """Keep the latest state snapshot of a component for the session summary"""
        self.component_states[component] = {"state": state, "timestamp": datetime.now().isoformat()}
        self.log_debug(f"State: {json.dumps(state, default=str)}", component)

    def record_export(self, path: Path):
        """Remember an exported project file for the session summary"""
        self.exported_files.append(str(path))
        self._append_jsonl(self.export_log_file, {
            "session_id": self.session_id,
            "project_title": self.project_title,
            "path": str(path),
            "timestamp": datetime.now().isoformat(),
        })
        self.log_info(f"Project exported to {path}", "project_export")

    def get_session_summary(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "project_title": self.project_title,
            "log_files": {
                "session": str(self.main_log_file),
                "llm": str(self.llm_log_file),
                "exports": str(self.export_log_file),
            },
            "llm_conversation_counts": dict(self.llm_counters),
            "exported_files": list(self.exported_files),
            "component_states": {name: entry["state"] for name, entry in self.component_states.items()},
        }

    def finalize_session(self):
        """Write the session summary and release the log handlers"""
        summary_file = self.session_log_dir / f"{self.session_id}_summary.json"
        with open(summary_file, 'w', encoding='utf-8') as f:
            json.dump(self.get_session_summary(), f, indent=2, ensure_ascii=False, default=str)

        self.logger.info(f"Session {self.session_id} finished, summary in {summary_file}")
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)


def init_debug_logger(debug_mode: bool = False, project_title: str = None, log_dir: str = "logs") -> DebugLogger:
    """Create the logger for one workspace session"""
    return DebugLogger(debug_mode=debug_mode, log_dir=log_dir, project_title=project_title)
