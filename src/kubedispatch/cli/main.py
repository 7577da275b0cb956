#!/usr/bin/env python3
"""
KUBEDISPATCH CLI
----------------
Command-line front end for the operation engine and the cluster
registration record.

    kubedispatch apply create manifest.json -n litmus
    kubedispatch registration status
    kubedispatch registration register --key KEY --cluster-id ID

Author: KubeDispatch Team
Date: 2026-10-18
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional, Tuple

from rich.console import Console

from kubedispatch.cli.formatter import ResultFormatter
from kubedispatch.cluster.client import build_clients
from kubedispatch.cluster.registration import RegistrationStore
from kubedispatch.core.config import AgentSettings
from kubedispatch.core.engine import OperationEngine
from kubedispatch.core.errors import KubeDispatchError, DecodeError
from kubedispatch.core.models import Verb

VERSION = "kubedispatch v1.0.0"

console = Console()


class KubeDispatchCLI:
    """
    CLI wrapper that translates user commands into engine calls.
    """

    def __init__(self, settings: Optional[AgentSettings] = None, clients=None):
        self.settings = settings
        self.clients = clients
        self.formatter = ResultFormatter(console)
        self.parser = argparse.ArgumentParser(
            prog="kubedispatch",
            description="KubeDispatch - Schema-less create/update/get/delete for any Kubernetes kind",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=VERSION)
        self.parser.add_argument("--kubeconfig", help="Path to a kubeconfig file")
        self.parser.add_argument("--context", help="Kubeconfig context to use")
        self.parser.add_argument("--log-level", help="Logging level (default: INFO)")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        # 'apply' subcommand - one verb against one manifest
        apply_parser = subparsers.add_parser("apply", help="Run a verb against a manifest")
        apply_parser.add_argument("verb", choices=[v.value for v in Verb], help="Operation to perform")
        apply_parser.add_argument("manifest", help="Path to a JSON/YAML manifest, or '-' for stdin")
        apply_parser.add_argument("-n", "--namespace", help="Target namespace (default: agent namespace)")
        apply_parser.add_argument("--format", choices=["json", "yaml"], help="Manifest format (default: from extension)")
        apply_parser.add_argument("-o", "--output", choices=["yaml", "json"], default="yaml", help="Result format")

        # 'registration' subcommand - one-time handshake record
        reg_parser = subparsers.add_parser("registration", help="Inspect or create the registration record")
        reg_parser.add_argument("-n", "--namespace", help="Agent namespace (default: $AGENT_NAMESPACE)")
        reg_sub = reg_parser.add_subparsers(dest="action", metavar="Action")
        reg_sub.add_parser("status", help="Show whether this cluster is confirmed")
        register = reg_sub.add_parser("register", help="Create the registration record")
        register.add_argument("--key", required=True, help="Cluster key issued by the parent system")
        register.add_argument("--cluster-id", required=True, help="Cluster id issued by the parent system")

    def _read_manifest(self, path: str, fmt: Optional[str]) -> Tuple[str, str]:
        if path == "-":
            return sys.stdin.read(), fmt or "json"

        manifest_path = Path(path)
        if not manifest_path.is_file():
            raise DecodeError(f"Manifest '{path}' not found")

        if fmt is None:
            fmt = "yaml" if manifest_path.suffix.lower() in (".yaml", ".yml") else "json"
        return manifest_path.read_text(encoding='utf-8-sig'), fmt

    def _clients(self):
        if self.clients is None:
            self.clients = build_clients(self.settings)
        return self.clients

    def _run_apply(self, args: argparse.Namespace) -> int:
        manifest, fmt = self._read_manifest(args.manifest, args.format)
        engine = OperationEngine(self._clients().registry)
        namespace = args.namespace or self.settings.agent_namespace
        result = engine.perform_operation(manifest, args.verb, namespace, fmt=fmt)
        self.formatter.show_result(result, output=args.output)
        return 0

    def _run_registration(self, args: argparse.Namespace) -> int:
        namespace = args.namespace or self.settings.agent_namespace
        store = RegistrationStore(self._clients().core_v1, namespace, self.settings.registration_config)

        if args.action == "register":
            record = store.register(args.key, args.cluster_id)
        elif args.action == "status":
            record = store.read()
        else:
            self.parser.print_help()
            return 2

        self.formatter.show_registration(record, namespace, store.config_name)
        return 0

    def run(self, argv=None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        if args.command is None:
            self.parser.print_help()
            return 0

        try:
            base = self.settings or AgentSettings.from_env()
            self.settings = base.override(
                kubeconfig=args.kubeconfig,
                context=args.context,
                log_level=args.log_level.upper() if args.log_level else None,
            )
            logging.basicConfig(
                level=getattr(logging, self.settings.log_level, logging.INFO),
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            )

            if args.command == "apply":
                return self._run_apply(args)
            return self._run_registration(args)
        except KubeDispatchError as e:
            self.formatter.show_error(e)
            return 1


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeDispatchCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(130)


if __name__ == "__main__":
    main()
