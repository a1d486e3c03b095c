#!/usr/bin/env python3
"""
Web workspace for ARCH

One tab per facility with run and promote actions, the architect's ledger for the
facility on screen, a language toggle and project export, built with Gradio Blocks.
"""

import socket
from functools import partial
from pathlib import Path
from typing import Dict, Optional

import gradio as gr

from ..facilities.blueprint_metrics import critical_components, status_counts, total_method_weeks, update_node
from ..facilities.facility_kind import FACILITY_SEQUENCE, FacilityKind
from ..pipelines.facility_session import FacilitySession, create_session
from ..state.project_export import DEFAULT_EXPORT_FILENAME, export_project
from ..state.promotion import promotion_target, question_node_text
from .debug_logger import DebugLogger, init_debug_logger
from .slice_views import ledger_markdown, slice_table


FACILITY_TITLES = {
    FacilityKind.QUESTION_EXPLORER: "Question Explorer",
    FacilityKind.HYPOTHESIS_ENGINE: "Hypothesis Engine",
    FacilityKind.PROJECT_MAPPER: "Project Mapper",
    FacilityKind.EXPERTISE_DETECTOR: "Expertise Detector",
    FacilityKind.LIT_STRATEGY: "Literature Strategy",
    FacilityKind.SPEC_VIEWER: "Overview",
}

OVERVIEW_MARKDOWN = """
## ARCH (Research Architect)

An AI-supported research design scaffold. It provides the structural blueprint of a
study (question maps, testable hypothesis sets, project blueprints, expertise heatmaps
and keyword search plans) without writing the final prose.

**Boundaries.** ARCH does not browse the web and does not provide citations. Literature
support is keywords only. Every result separates `user_claims`, `system_inferences` and
`assumptions`, shown in the ledger next to each facility.

**Flow.** Question Explorer -> Hypothesis Engine -> Project Mapper -> Expertise Detector
-> Literature Strategy. Promote a result to pre-fill the next facility.
"""

RUNNING_STATUS = "Running..."


class ArchWorkspaceUI:
    """
    Single-project workspace served by Gradio

    The workspace owns one FacilitySession, so every browser connected to the same
    server shares one project document and its session settings.
    """

    def __init__(self, config: Dict = None, port: int = 7860, share: bool = False,
                 host: str = 'localhost', logger: DebugLogger = None):
        self.config = config or {}
        self.port = port
        self.share = share
        self.host = host or 'localhost'
        self.interface = None

        logging_config = self.config.get('logging') or {}
        self.logger = logger or init_debug_logger(
            debug_mode=logging_config.get('debug', False),
            project_title=(self.config.get('project') or {}).get('title'),
            log_dir=logging_config.get('log_dir', 'logs'),
        )

        self.setup_error = None
        self.session: Optional[FacilitySession] = None
        try:
            self.session = create_session(self.config, self.logger)
        except ValueError as e:
            self.setup_error = str(e)
            self.logger.log_error("Workspace started without a generation client", "web_ui", e)

    # Rendering

    def _status(self, kind: FacilityKind) -> str:
        if self.setup_error:
            return f"Generation unavailable: {self.setup_error}"
        store = self.session.store
        if store.is_busy(kind):
            return RUNNING_STATUS
        data = store.get_slice(kind)
        if data is None:
            return "Not run yet."
        if data.get("error"):
            return "Last run failed; showing the default state. Try again."

        status = "Ready."
        if kind == FacilityKind.PROJECT_MAPPER:
            status += f" Method workload: {total_method_weeks(data)} weeks."
        elif kind == FacilityKind.EXPERTISE_DETECTOR:
            counts = status_counts(data)
            critical = ", ".join(c.get("topic", "") for c in critical_components(data))
            status += f" Green {counts['green']} / yellow {counts['yellow']} / red {counts['red']}."
            if critical:
                status += f" Critical: {critical}."
        elif kind == FacilityKind.QUESTION_EXPLORER:
            status += f" Root question: {data.get('root_question', '')}"
        return status

    def _header(self) -> str:
        if self.session is None:
            return "**No project session**"
        store = self.session.store
        return (f"**{store.document.title}** - {store.document.description}  \n"
                f"Language: {store.language.display_name} - Session time: {store.elapsed_minutes()} min")

    def _ledger(self) -> str:
        if self.session is None:
            return ""
        return ledger_markdown(self.session.store.active_claims())

    def _render(self, kind: FacilityKind):
        data = self.session.store.get_slice(kind) if self.session else None
        return slice_table(kind, data), data or {}, self._status(kind), self._ledger(), self._header()

    # Event handlers

    def _start_run(self, kind: FacilityKind):
        return gr.update(interactive=False), RUNNING_STATUS

    def _run_control(self, kind: FacilityKind):
        busy = self.session is not None and self.session.store.is_busy(kind)
        return gr.update(interactive=not busy)

    async def _run(self, kind: FacilityKind, user_input: str):
        if self.session is None:
            return self._render(kind)
        await self.session.run_facility(kind, user_input)
        return self._render(kind)

    async def _pivot(self, node_id: str):
        kind = FacilityKind.QUESTION_EXPLORER
        node_id = (node_id or "").strip()
        if self.session is None or not node_id:
            return (gr.update(),) + self._render(kind)
        try:
            text = question_node_text(self.session.store.get_slice(kind), node_id)
        except KeyError as e:
            gr.Warning(str(e))
            return (gr.update(),) + self._render(kind)
        await self.session.pivot(node_id)
        return (gr.update(value=text),) + self._render(kind)

    def _navigate(self, kind: FacilityKind):
        if self.session is not None:
            self.session.store.navigate(kind)
        return self._ledger(), self._header()

    def _promote(self, kind: FacilityKind, node_id: str = ""):
        if self.session is None:
            return gr.update(), gr.update(), self._ledger()
        try:
            target = self.session.promote(kind, (node_id or "").strip() or None)
        except KeyError as e:
            gr.Warning(str(e))
            return gr.update(), gr.update(), self._ledger()
        if target is None:
            gr.Info("Nothing to promote yet.")
            return gr.update(), gr.update(), self._ledger()
        prefill = self.session.store.take_prefill()
        return gr.Tabs(selected=target.value), gr.update(value=prefill), self._ledger()

    def _update_blueprint_node(self, node_id: str, weeks, effort, uncertainty):
        kind = FacilityKind.PROJECT_MAPPER
        if self.session is None or not self.session.store.get_slice(kind):
            return self._render(kind)
        metrics = {name: value for name, value in (("timeEstimate", weeks),
                                                   ("effortLevel", effort),
                                                   ("uncertaintyLevel", uncertainty)) if value is not None}
        try:
            blueprint = update_node(self.session.store.get_slice(kind), (node_id or "").strip(), **metrics)
        except (KeyError, ValueError) as e:
            gr.Warning(str(e))
            return self._render(kind)
        self.session.store.update_slice(kind, blueprint)
        return self._render(kind)

    def _set_language(self, language: str):
        if self.session is not None:
            self.session.store.set_language(language)
        return self._header()

    def _export(self) -> Optional[str]:
        if self.session is None:
            return None
        filename = (self.config.get('export') or {}).get('filename', DEFAULT_EXPORT_FILENAME)
        path = export_project(self.session.store.document, Path(filename), self.logger)
        return str(path)

    # Layout

    def create_interface(self):
        """Create the Gradio interface"""
        with gr.Blocks(title="ARCH - Research Architect", theme=gr.themes.Soft()) as interface:
            with gr.Row():
                with gr.Column(scale=8):
                    gr.Markdown("# ARCH - Research Architect")
                    header = gr.Markdown(self._header())
                with gr.Column(scale=2, min_width=200):
                    language = gr.Radio(
                        choices=[("English", "en"), ("Español", "es")],
                        value=self.session.store.language.value if self.session else "en",
                        label="Response language"
                    )
                    export_btn = gr.Button("Export project", size="sm")
                    export_file = gr.File(label="Exported project", interactive=False)

            with gr.Row(equal_height=False):
                with gr.Column(scale=3):
                    with gr.Tabs() as tabs:
                        panels = {}
                        for kind in FACILITY_SEQUENCE:
                            with gr.Tab(FACILITY_TITLES[kind], id=kind.value) as tab:
                                panels[kind] = self._facility_panel(kind)
                                panels[kind]["tab"] = tab
                        with gr.Tab(FACILITY_TITLES[FacilityKind.SPEC_VIEWER], id=FacilityKind.SPEC_VIEWER.value) as overview_tab:
                            gr.Markdown(OVERVIEW_MARKDOWN)
                with gr.Column(scale=1, min_width=300):
                    gr.Markdown("## Architect's Ledger")
                    ledger = gr.Markdown(self._ledger())

            # Event handlers

            for kind, panel in panels.items():
                outputs = [panel["table"], panel["json"], panel["status"], ledger, header]

                # The run button stays disabled while the facility has a request outstanding
                panel["run"].click(
                    fn=partial(self._start_run, kind), outputs=[panel["run"], panel["status"]]
                ).then(
                    fn=partial(self._run, kind), inputs=[panel["input"]], outputs=outputs
                ).then(
                    fn=partial(self._run_control, kind), outputs=[panel["run"]]
                )
                panel["tab"].select(fn=partial(self._navigate, kind), outputs=[ledger, header])

                target = promotion_target(kind)
                if target is not None:
                    promote_inputs = [panel["node_id"]] if "node_id" in panel else []
                    panel["promote"].click(
                        fn=partial(self._promote, kind),
                        inputs=promote_inputs,
                        outputs=[tabs, panels[target]["input"], ledger]
                    )

            explorer = panels[FacilityKind.QUESTION_EXPLORER]
            explorer["pivot"].click(
                fn=partial(self._start_run, FacilityKind.QUESTION_EXPLORER),
                outputs=[explorer["run"], explorer["status"]]
            ).then(
                fn=self._pivot,
                inputs=[explorer["node_id"]],
                outputs=[explorer["input"], explorer["table"], explorer["json"], explorer["status"], ledger, header]
            ).then(
                fn=partial(self._run_control, FacilityKind.QUESTION_EXPLORER), outputs=[explorer["run"]]
            )

            mapper = panels[FacilityKind.PROJECT_MAPPER]
            mapper["update"].click(
                fn=self._update_blueprint_node,
                inputs=[mapper["edit_id"], mapper["weeks"], mapper["effort"], mapper["uncertainty"]],
                outputs=[mapper["table"], mapper["json"], mapper["status"], ledger, header]
            )

            overview_tab.select(fn=partial(self._navigate, FacilityKind.SPEC_VIEWER), outputs=[ledger, header])
            language.change(fn=self._set_language, inputs=[language], outputs=[header])
            export_btn.click(fn=self._export, outputs=[export_file])

        return interface

    def _facility_panel(self, kind: FacilityKind) -> Dict:
        panel = {}
        table, data, status, _, _ = self._render(kind)
        panel["input"] = gr.Textbox(label="Input", lines=3,
                                    placeholder="Leave empty to let ARCH work from the current project")
        with gr.Row():
            panel["run"] = gr.Button("Run", variant="primary")
            target = promotion_target(kind)
            if target is not None:
                panel["promote"] = gr.Button(f"Promote to {FACILITY_TITLES[target]}")
        if kind == FacilityKind.QUESTION_EXPLORER:
            with gr.Row():
                panel["node_id"] = gr.Textbox(label="Node id (promote or re-explore a single node)", max_lines=1)
                panel["pivot"] = gr.Button("Re-explore from node", size="sm")

        panel["status"] = gr.Markdown(status)
        panel["table"] = gr.Dataframe(value=table, interactive=False, wrap=True)

        if kind == FacilityKind.PROJECT_MAPPER:
            with gr.Accordion("Edit node resources", open=False):
                with gr.Row():
                    panel["edit_id"] = gr.Textbox(label="Node id", max_lines=1)
                    panel["weeks"] = gr.Number(label="Weeks (0-52)", value=None)
                    panel["effort"] = gr.Number(label="Effort (1-10)", value=None)
                    panel["uncertainty"] = gr.Number(label="Uncertainty (1-10)", value=None)
                panel["update"] = gr.Button("Update node", size="sm")

        with gr.Accordion("Raw result", open=False):
            panel["json"] = gr.JSON(value=data)
        return panel

    def launch(self):
        """Launch the workspace"""
        if not self.interface:
            self.interface = self.create_interface()

        def is_port_available(port):
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                    s.bind((self.host, port))
                return True
            except OSError:
                return False

        available_port = self.port
        for port_offset in range(10):
            test_port = self.port + port_offset
            if is_port_available(test_port):
                available_port = test_port
                break

        if available_port != self.port:
            print(f"Port {self.port} occupied, using port {available_port} instead")

        print(f"Starting ARCH workspace at: http://{self.host}:{available_port}")

        self.interface.launch(
            server_name=self.host,
            server_port=available_port,
            share=self.share,
            show_error=True,
            inbrowser=True
        )
