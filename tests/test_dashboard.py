"""
Tests for the Dash shell: rendering of view snapshots and control dispatch.
"""

import dash
import pytest
from dash import dcc
from fxvol import config
from fxvol.dashboard import (
    build_layout, controls_style, create_app, dispatch, render_content, render_status,
)
from fxvol.mock_data import generate_mock_surface
from fxvol.view_model import SurfaceViewModel, ViewState


def _text(component):
    """Flatten all string children of a component tree."""
    if isinstance(component, str):
        return component
    if isinstance(component, (list, tuple)):
        return " ".join(_text(c) for c in component)
    children = getattr(component, "children", None)
    return "" if children is None else _text(children)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def vm(calls):
    def fetcher(pair, mode):
        calls.append((pair, mode))
        return generate_mock_surface(pair)
    return SurfaceViewModel(fetcher=fetcher)


class TestRenderContent:

    def test_surface_graph(self):
        state = ViewState(pair="GBPUSD", surface=generate_mock_surface("GBPUSD"))
        content = render_content(state)
        assert isinstance(content, dcc.Graph)
        assert content.figure.data[0].type == "surface"
        assert content.config["toImageButtonOptions"]["filename"] == "GBPUSD_volatility_surface"

    def test_loading(self):
        assert "Loading" in _text(render_content(ViewState(loading=True)))

    def test_error(self):
        text = _text(render_content(ViewState(error="gateway down")))
        assert "Error" in text
        assert "gateway down" in text

    def test_empty_state(self):
        assert "No Data Available" in _text(render_content(ViewState()))

    def test_placeholder_tabs(self):
        for tab_id, label in config.TABS[1:]:
            text = _text(render_content(ViewState(active_tab=tab_id)))
            assert label in text
            assert "Coming soon" in text

    def test_controls_hidden_off_surface_tab(self):
        assert controls_style(ViewState(active_tab="portfolio"))["display"] == "none"
        assert controls_style(ViewState())["display"] == "flex"


class TestRenderStatus:

    def test_connected(self):
        _, text, api = render_status(ViewState(connected=True))
        assert text == "Bloomberg Connected"
        assert api == "API: bloomberg-gateway"

    def test_disconnected(self):
        _, text, api = render_status(ViewState(connected=False))
        assert text == "Bloomberg Disconnected"
        assert api == "API: nginx-proxy"


class TestDispatch:

    def test_initial_load(self, vm, calls):
        state = dispatch(vm, None, config.SURFACE_TAB, "EURUSD", "Live")
        assert calls == [("EURUSD", "Live")]
        assert state.surface is not None

    def test_pair_change(self, vm, calls):
        state = dispatch(vm, "pair-dropdown", config.SURFACE_TAB, "GBPUSD", "Live")
        assert calls == [("GBPUSD", "Live")]
        assert state.surface.shape == (13, 17)

    def test_mode_change(self, vm, calls):
        dispatch(vm, "mode-dropdown", config.SURFACE_TAB, "EURUSD", "Latest EOD")
        assert calls == [("EURUSD", "Latest EOD")]

    def test_refresh(self, vm, calls):
        first = dispatch(vm, "pair-dropdown", config.SURFACE_TAB, "GBPUSD", "Live").surface
        second = dispatch(vm, "refresh-button", config.SURFACE_TAB, "GBPUSD", "Live").surface
        assert second is not first
        assert second.shape == first.shape
        assert len(calls) == 2

    def test_tab_round_trip_refetches(self, vm, calls):
        dispatch(vm, None, config.SURFACE_TAB, "EURUSD", "Live")
        state = dispatch(vm, "main-tabs", "fx-forwards", "EURUSD", "Live")
        assert state.active_tab == "fx-forwards"
        assert len(calls) == 1
        dispatch(vm, "main-tabs", config.SURFACE_TAB, "EURUSD", "Live")
        assert len(calls) == 2


class TestApp:

    def test_layout_ids(self):
        layout = build_layout(ViewState())
        ids = set()

        def walk(component):
            if isinstance(component, (list, tuple)):
                for c in component:
                    walk(c)
                return
            component_id = getattr(component, "id", None)
            if component_id:
                ids.add(component_id)
            children = getattr(component, "children", None)
            if children is not None and not isinstance(children, str):
                walk(children)

        walk(layout)
        for expected in ["status-dot", "status-text", "api-info", "health-interval", "main-tabs",
                         "mode-dropdown", "pair-dropdown", "refresh-button", "tab-content"]:
            assert expected in ids

    def test_create_app_with_view_model(self, vm):
        app = create_app(view_model=vm)
        assert isinstance(app, dash.Dash)
        assert app.title == config.APP_TITLE
        assert len(app.callback_map) == 2
