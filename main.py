#!/usr/bin/env python3
"""
main.py — Build an FX vol surface, or serve the dashboard.

Usage:
    python main.py                               # mock surface for EURUSD, write charts
    python main.py --pair GBPUSD --source gateway
    python main.py --serve --port 8050           # run the Dash dashboard
    python main.py --watch                       # poll gateway health until Ctrl-C
"""

import argparse
import logging
import sys
import time

import numpy as np

from fxvol import config
from fxvol.dashboard import create_app
from fxvol.gateway import GatewayClient, GatewayError, fetch_volatility_surface
from fxvol.monitor import ConnectionMonitor
from fxvol.surface import compute_surface_statistics
from fxvol.visualization import plot_smile_plotly, plot_surface_matplotlib, plot_surface_plotly


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="FX implied volatility surface dashboard.")
    p.add_argument("--pair", choices=config.CURRENCY_PAIRS, default=config.DEFAULT_PAIR)
    p.add_argument("--mode", choices=config.DATA_MODES, default=config.DEFAULT_MODE)
    p.add_argument("--source", choices=["mock", "gateway"], default="mock")
    p.add_argument("--base-url", type=str, default=None)
    p.add_argument("--no-fallback", action="store_true",
                   help="fail instead of serving synthetic data when the gateway errors")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--no-html", action="store_true")
    p.add_argument("--serve", action="store_true")
    p.add_argument("--watch", action="store_true")
    p.add_argument("--host", type=str, default=config.HOST)
    p.add_argument("--port", type=int, default=config.PORT)
    p.add_argument("--debug", action="store_true")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def run_pipeline(args, client):
    print(f"\n{'='*60}")
    print(f"  FX Volatility Surface")
    print(f"  Source: {args.source}  |  Pair: {args.pair}  |  Mode: {args.mode}")
    print(f"{'='*60}\n")

    t0 = time.time()
    print("[1/3] Fetching surface...")
    try:
        surface = fetch_volatility_surface(
            args.pair, args.mode,
            client=client,
            dev_mode=args.source == "mock",
            fallback_to_mock=not args.no_fallback,
            seed=args.seed,
        )
    except GatewayError as e:
        print(f"\n  ERROR: {e}")
        sys.exit(1)

    stats = compute_surface_statistics(surface)
    print(f"       Grid: {stats['n_tenors']} tenors x {stats['n_deltas']} deltas")
    print(f"       Vol range: {stats['vol_range'][0]:.2f}% - {stats['vol_range'][1]:.2f}%")
    if not np.isnan(stats["atm_vol_mean"]):
        print(f"       ATM vol (mean): {stats['atm_vol_mean']:.2f}%")
        print(f"       ATM term slope: {stats['term_slope']:+.2f} vol pts")

    config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    print("\n[2/3] Generating static chart...")
    plot_surface_matplotlib(surface, args.pair)
    print(f"       -> output/{args.pair}_vol_surface_3d.png")

    if not args.no_html:
        print("\n[3/3] Generating interactive HTML...")
        plot_surface_plotly(surface, args.pair)
        print(f"       -> output/{args.pair}_vol_surface_3d.html")
        plot_smile_plotly(surface, args.pair)
        print(f"       -> output/{args.pair}_vol_smile_2d.html")
    else:
        print("\n[3/3] Skipping HTML (--no-html flag)")

    csv_path = config.DATA_DIR / f"{args.pair}_vol_surface.csv"
    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    surface.to_frame().to_csv(csv_path)
    print(f"\n       Surface grid saved to data/{csv_path.name}")

    elapsed = time.time() - t0
    print(f"\n  Done in {elapsed:.1f}s. Charts are in output/\n")


def watch(client):
    print(f"Polling {client.base_url}{config.HEALTH_PATH} every {config.HEALTH_POLL_INTERVAL:.0f}s (Ctrl-C to stop)")
    monitor = ConnectionMonitor(
        client.check_connection,
        on_change=lambda up: print(f"  {time.strftime('%H:%M:%S')}  {'connected' if up else 'disconnected'}"),
    )
    with monitor:
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with GatewayClient(base_url=args.base_url) as client:
        if args.serve:
            app = create_app(client=client)
            app.run(host=args.host, port=args.port, debug=args.debug)
        elif args.watch:
            watch(client)
        else:
            run_pipeline(args, client)


if __name__ == "__main__":
    main()
