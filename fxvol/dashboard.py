"""
Dash presentation shell for the vol surface.

Layout, top to bottom:
    header    : title, gateway status dot, API label
    tabs      : volatility surface + placeholder analytics views
    controls  : data mode, currency pair, "Refresh Now"
    content   : spinner / error / empty state / 3D surface

The callbacks hold no state of their own. Each one turns the triggering
control into a change intent on the app's SurfaceViewModel and renders
the snapshot it returns.
"""

from functools import partial

import dash
from dash import dcc, html, Input, Output

from . import config
from .gateway import GatewayClient, fetch_volatility_surface
from .monitor import ConnectionMonitor
from .view_model import SurfaceViewModel, ViewState
from .visualization import build_surface_figure, graph_config


colors = {
    "background": config.DARK_BG, "card_bg": config.PANEL_BG, "border": config.BORDER_COLOR,
    "text": "#e0e0e0", "muted": config.MUTED_TEXT, "accent": config.ACCENT,
    "connected": config.CONNECTED_COLOR, "disconnected": config.DISCONNECTED_COLOR,
}

HEADER_STYLE = {
    "display": "flex", "justifyContent": "space-between", "alignItems": "center",
    "padding": "12px 24px", "backgroundColor": colors["card_bg"],
    "borderBottom": f"1px solid {colors['border']}",
}

TAB_STYLE = {
    "backgroundColor": colors["card_bg"], "color": "#888", "border": "none",
    "padding": "12px", "fontWeight": "bold",
}
TAB_SELECTED_STYLE = {
    "backgroundColor": "#262626", "color": colors["accent"],
    "borderTop": f"3px solid {colors['accent']}", "padding": "12px",
}

PANEL_STYLE = {
    "backgroundColor": colors["card_bg"], "borderRadius": "10px",
    "minHeight": "600px", "padding": "10px", "boxSizing": "border-box",
    "display": "flex", "alignItems": "center", "justifyContent": "center",
}

CONTROLS_STYLE = {
    "display": "flex", "flexWrap": "wrap", "alignItems": "center",
    "justifyContent": "space-between", "gap": "12px", "marginBottom": "16px",
}

BUTTON_STYLE = {
    "backgroundColor": colors["accent"], "color": "#0f0f0f", "border": "none",
    "borderRadius": "6px", "padding": "8px 16px", "fontWeight": "bold", "cursor": "pointer",
}

DROPDOWN_STYLE = {"width": "180px", "color": "#111"}


# ── render helpers ──────────────────────────────────────────────────────

def api_label(connected: bool) -> str:
    return "bloomberg-gateway" if connected else "nginx-proxy"


def render_status(state: ViewState):
    """(dot style, status text, API label) for the header."""
    dot_style = {
        "display": "inline-block", "width": "10px", "height": "10px",
        "borderRadius": "50%", "marginRight": "8px",
        "backgroundColor": colors["connected"] if state.connected else colors["disconnected"],
    }
    text = f"Bloomberg {'Connected' if state.connected else 'Disconnected'}"
    return dot_style, text, f"API: {api_label(state.connected)}"


def message_panel(title: str, message: str, class_name: str = "no-data"):
    return html.Div(className=class_name, style={"textAlign": "center"}, children=[
        html.Div(title, className=f"{class_name}-title",
                 style={"fontSize": "1.4rem", "fontWeight": "bold", "color": colors["text"]}),
        html.Div(message, className=f"{class_name}-message",
                 style={"color": colors["muted"], "marginTop": "8px"}),
    ])


def render_content(state: ViewState):
    """Children for the content panel given a view snapshot."""
    if state.active_tab != config.SURFACE_TAB:
        label = dict(config.TABS)[state.active_tab]
        return message_panel(label, "Coming soon")

    if state.loading:
        return message_panel("Loading", "Fetching volatility surface...", class_name="loading-container")

    if state.error:
        return html.Div(className="error-container", children=html.Div(
            className="error-text", style={"color": colors["disconnected"]},
            children=[html.Strong("Error: "), state.error],
        ))

    if state.surface is None:
        return message_panel(
            "No Data Available",
            "Bloomberg returned no volatility data for this currency pair",
        )

    return dcc.Graph(
        id="surface-graph",
        figure=build_surface_figure(state.surface),
        config=graph_config(state.pair),
        style={"width": "100%", "height": "70vh", "minHeight": "500px"},
    )


def controls_style(state: ViewState) -> dict:
    if state.active_tab != config.SURFACE_TAB:
        return dict(CONTROLS_STYLE, display="none")
    return CONTROLS_STYLE


def dispatch(view_model: SurfaceViewModel, trigger, tab, pair, mode) -> ViewState:
    """
    Apply the control that fired to the view model.

    `trigger` is the component id of the input that changed, or None on
    the initial page load, which loads the surface if its tab is showing.
    """
    if trigger == "main-tabs":
        return view_model.select_tab(tab)
    if trigger == "pair-dropdown":
        return view_model.select_pair(pair)
    if trigger == "mode-dropdown":
        return view_model.select_mode(mode)
    if trigger == "refresh-button":
        return view_model.refresh()

    # the layout was rendered from the current snapshot, so only the fetch is missing
    if view_model.state.active_tab == config.SURFACE_TAB:
        return view_model.load()
    return view_model.state


# ── layout ──────────────────────────────────────────────────────────────

def build_layout(state: ViewState):
    dot_style, status_text, api_text = render_status(state)

    header = html.Header(style=HEADER_STYLE, children=[
        html.H1(style={"margin": 0, "fontSize": "1.4rem", "color": colors["text"]}, children=[
            config.APP_TITLE,
            html.Span(config.APP_SUBTITLE, style={
                "display": "block", "fontSize": "0.85rem",
                "fontWeight": "normal", "color": colors["muted"],
            }),
        ]),
        html.Div(style={"textAlign": "right"}, children=[
            html.Div([
                html.Span(id="status-dot", style=dot_style),
                html.Span(status_text, id="status-text", style={"color": colors["text"]}),
            ]),
            html.Div(api_text, id="api-info", style={"color": colors["muted"], "fontSize": "0.8rem"}),
        ]),
    ])

    tabs = dcc.Tabs(id="main-tabs", value=state.active_tab, children=[
        dcc.Tab(label=label, value=tab_id, style=TAB_STYLE, selected_style=TAB_SELECTED_STYLE)
        for tab_id, label in config.TABS
    ])

    controls = html.Div(id="surface-controls", style=controls_style(state), children=[
        html.H2(state.title, id="controls-title",
                style={"fontSize": "1.1rem", "color": colors["text"], "margin": 0}),
        html.Div(style={"display": "flex", "gap": "12px", "alignItems": "center"}, children=[
            dcc.Dropdown(id="mode-dropdown", options=list(config.DATA_MODES), value=state.mode,
                         clearable=False, style=DROPDOWN_STYLE),
            dcc.Dropdown(id="pair-dropdown", options=list(config.CURRENCY_PAIRS), value=state.pair,
                         clearable=False, style=DROPDOWN_STYLE),
            html.Button("Refresh Now", id="refresh-button", n_clicks=0, style=BUTTON_STYLE),
        ]),
    ])

    return html.Div(
        style={"backgroundColor": colors["background"], "minHeight": "100vh",
               "fontFamily": "Arial, sans-serif"},
        children=[
            header,
            dcc.Interval(id="health-interval", interval=int(config.HEALTH_POLL_INTERVAL * 1000), n_intervals=0),
            tabs,
            html.Main(style={"padding": "20px"}, children=[
                controls,
                dcc.Loading(type="circle", children=html.Div(
                    id="tab-content", style=PANEL_STYLE, children=render_content(state),
                )),
            ]),
        ],
    )


# ── app factory ─────────────────────────────────────────────────────────

def register_callbacks(app: dash.Dash, view_model: SurfaceViewModel) -> None:

    @app.callback(
        [Output("status-dot", "style"), Output("status-text", "children"), Output("api-info", "children")],
        [Input("health-interval", "n_intervals")],
    )
    def update_status(n_intervals):
        return render_status(view_model.poll_connection())

    @app.callback(
        [Output("tab-content", "children"), Output("surface-controls", "style"),
         Output("controls-title", "children")],
        [Input("main-tabs", "value"), Input("pair-dropdown", "value"),
         Input("mode-dropdown", "value"), Input("refresh-button", "n_clicks")],
    )
    def update_content(tab, pair, mode, n_clicks):
        state = dispatch(view_model, dash.ctx.triggered_id, tab, pair, mode)
        return render_content(state), controls_style(state), state.title


def create_app(view_model: SurfaceViewModel = None, client: GatewayClient = None) -> dash.Dash:
    """
    Build the Dash app.

    Each app owns one view model; by default it talks to the configured
    gateway and polls its health endpoint.
    """
    if view_model is None:
        if client is None:
            client = GatewayClient()
        view_model = SurfaceViewModel(
            fetcher=partial(fetch_volatility_surface, client=client),
            monitor=ConnectionMonitor(client.check_connection),
        )

    app = dash.Dash(
        __name__, suppress_callback_exceptions=True, title=config.APP_TITLE,
        meta_tags=[{"name": "viewport", "content": "width=device-width, initial-scale=1"}],
    )
    # layout is rebuilt per page load so a reload shows the current snapshot
    app.layout = lambda: build_layout(view_model.state)
    register_callbacks(app, view_model)
    return app
