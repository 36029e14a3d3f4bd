#!/usr/bin/env python3
"""Live node status for a registered Proxmox cluster.

Lists the registered clusters, then polls the status of one of them and
prints a node table every time a new snapshot is accepted.

Usage
-----
Point the script at the monitoring backend and run::

    export PROXWATCH_API_URL="http://localhost:8080"
    python scripts/watch_status.py

Options::

    --cluster ID         Cluster to watch (default: first registered cluster)
    --interval MS        Polling period in milliseconds (default: config value)
    --duration SECS      Stop after SECS seconds (default: run until Ctrl-C)
    --disks              Print the disk inventory once before polling
    --verbose / -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from proxwatch import (  # noqa: E402
    ClusterDisks,
    ClusterStatus,
    FetchState,
    ProxwatchClient,
    ProxwatchConfig,
    ProxwatchError,
    format_bytes,
    format_uptime,
    usage_level,
)

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    return f"\n{'═' * 60}\n  {title}\n{'═' * 60}"


def _gauge(percent: float) -> str:
    return f"{percent:5.1f}% [{usage_level(percent).value}]"


def _print_disks(disks: ClusterDisks) -> None:
    print(_section(f"DISKS {disks.cluster_name or disks.cluster_id} ({disks.total_disks})"))
    for node in disks.nodes:
        if node.error:
            print(f"  {node.node_name:<12} error: {node.error}")
            continue
        for disk in node.disks:
            wear = f"{disk.wearout}%" if disk.wearout >= 0 else "-"
            print(
                f"  {node.node_name:<12} {disk.device:<16} {disk.type:<5} "
                f"{format_bytes(disk.size):>10}  {disk.health:<8} wear {wear}"
            )


def _render(state: FetchState[ClusterStatus], last_updated: Any) -> None:
    if state.loading and state.data is None:
        print("  loading…")
        return
    if state.error is not None:
        print(f"  ! {type(state.error).__name__}: {state.error}")
    status = state.data
    if status is None:
        return

    summary = status.resource_summary
    print(_section(f"STATUS {status.cluster_name or status.cluster_id}"))
    print(f"  updated   : {last_updated}")
    print(f"  VMs       : {summary.running_vms}/{summary.total_vms} running")
    print(f"  CTs       : {summary.running_containers}/{summary.total_containers} running")
    for node in status.nodes:
        if not node.is_online:
            print(f"  {node.node_name:<12} {node.status.value:<8} {node.error or ''}")
            continue
        load = " ".join(f"{value:.2f}" for value in node.load_avg)
        print(
            f"  {node.node_name:<12} cpu {_gauge(node.cpu_usage)}  "
            f"mem {_gauge(node.memory_usage)} of {format_bytes(node.memory_total)}  "
            f"up {format_uptime(node.uptime)}  load {load}"
        )


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Poll and print live node status of a Proxmox cluster.",
    )
    parser.add_argument("--cluster", help="Cluster to watch (default: first registered cluster)")
    parser.add_argument("--interval", type=int, help="Polling period in milliseconds")
    parser.add_argument("--duration", type=float, help="Stop after SECS seconds")
    parser.add_argument("--disks", action="store_true", help="Print the disk inventory once before polling")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = ProxwatchConfig.from_env()

    async with ProxwatchClient(config) as client:
        cluster_id = args.cluster
        if cluster_id is None:
            clusters = await client.list_clusters()
            if not clusters.clusters:
                print("No clusters registered.", file=sys.stderr)
                return
            cluster_id = clusters.clusters[0].id

        if args.disks:
            _print_disks(await client.get_cluster_disks(cluster_id))

        async with client.poll_cluster_status(cluster_id, interval_ms=args.interval) as status:
            status.subscribe(lambda state: _render(state, status.last_updated))
            with contextlib.suppress(TimeoutError):
                async with asyncio.timeout(args.duration):
                    await asyncio.Event().wait()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ProxwatchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
