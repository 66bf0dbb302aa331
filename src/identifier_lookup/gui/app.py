from __future__ import annotations

import asyncio
from typing import Any

from identifier_lookup.config import LookupSettings
from identifier_lookup.models import IdentifierType
from identifier_lookup.registry import default_registry
from identifier_lookup.session import LookupController, PanelKind

TITLE = "Identifier Lookup"


def _type_options() -> dict[str, str]:
    return {
        profile.identifier_type.value: profile.title
        for profile in default_registry().profiles()
    }


def launch_gui(
    port: int = 8080,
    settings: LookupSettings | None = None,
) -> None:
    """Launch the lookup form."""

    try:
        from nicegui import ui  # type: ignore
    except ImportError:
        _launch_streamlit_fallback(settings)
        return

    controller = LookupController(settings=settings)

    def refresh() -> None:
        state = controller.state
        value_input.props(f'placeholder="{state.placeholder}"')
        submit_button.text = state.submit_label
        submit_button.set_enabled(not state.busy)
        result_box.text = state.panel.text
        result_box.classes(
            replace=f"result-box whitespace-pre-wrap {state.panel.kind.value}"
        )
        result_box.set_visibility(state.panel.visible)

    def on_type_change(event: Any) -> None:
        selected = IdentifierType.parse(event.value) if event.value else None
        controller.select_type(selected)
        value_input.value = ""
        refresh()

    async def on_submit() -> None:
        task = asyncio.ensure_future(controller.submit(str(value_input.value or "")))
        # Let submit() flip the busy flag before repainting the button.
        await asyncio.sleep(0)
        refresh()
        await task
        refresh()

    ui.label(TITLE).classes("text-2xl")
    ui.select(_type_options(), label="Type", on_change=on_type_change)
    value_input = ui.input("Value", placeholder=controller.state.placeholder)
    value_input.on("keydown.enter", on_submit)
    submit_button = ui.button(controller.state.submit_label, on_click=on_submit)
    result_box = ui.label("").classes("result-box whitespace-pre-wrap")
    result_box.set_visibility(False)
    ui.run(port=port, title=TITLE, reload=False)


def _launch_streamlit_fallback(settings: LookupSettings | None) -> None:
    try:
        import streamlit as st  # type: ignore
    except ImportError as exc:  # pragma: no cover
        raise SystemExit(
            "GUI extras not installed; install with `pip install .[gui]`"
        ) from exc

    options = _type_options()
    controller = LookupController(settings=settings)

    st.title(f"{TITLE} (fallback)")
    selected = st.selectbox(
        "Type",
        list(options),
        format_func=lambda key: options[key],
    )
    controller.select_type(IdentifierType.parse(selected))
    value = st.text_input("Value", placeholder=controller.state.placeholder)

    if st.button(controller.state.submit_label):
        asyncio.run(controller.submit(value))
        panel = controller.state.panel
        if panel.kind is PanelKind.SUCCESS:
            st.success("Lookup complete")
            st.text(panel.text)
        elif panel.kind is PanelKind.ERROR:
            st.error(panel.text)


__all__ = ["launch_gui"]
