"""Command-line interface for gac."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Callable, Optional

from . import __version__
from .config import (
    DEFAULT_MODELS,
    SUPPORTED_LANGUAGES,
    SUPPORTED_STYLES,
    Config,
    config_file_path,
    load_config,
    model_options,
    reset_config,
    save_config,
    update_config,
)
from .core import GitAutoCommitWorkflow
from .exceptions import BackendError, ConfigError, GacError, GitError, ValidationError

RESET = "\033[0m"
BOLD = "\033[1m"
CYAN = "\033[96m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
DIM = "\033[2m"
RED = "\033[91m"

_STATUS_COLOURS = {"M": YELLOW, "A": GREEN, "D": RED, "?": DIM}


class CLI:
    """Argument parsing and command dispatch."""

    def __init__(self, input_fn: Callable[[str], str] = input) -> None:
        self.parser = self._create_parser()
        self._input = input_fn

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="gac",
            description="Git Auto Commit - AI generated commit messages",
        )
        parser.add_argument("--version", action="version", version=__version__)
        parser.add_argument(
            "--repo-path", default=None, help="Repository path (default: cwd)"
        )
        parser.add_argument(
            "--debug", action="store_true", help="Enable debug logging"
        )
        sub = parser.add_subparsers(dest="command")

        gen = sub.add_parser("generate", aliases=["gen"], help="Generate a message")
        gen.add_argument(
            "-m", "--multiple", action="store_true", help="Generate several options"
        )
        gen.add_argument("-c", "--count", type=int, default=3)
        gen.add_argument(
            "--hook",
            action="store_true",
            help="Print only the message (for git hooks)",
        )

        commit = sub.add_parser("commit", aliases=["c"], help="Generate and commit")
        commit.add_argument("-m", "--message", help="Commit with this message")
        commit.add_argument("-c", "--count", type=int, default=3)
        commit.add_argument(
            "--pick", type=int, default=None, help="Use candidate N (1-based)"
        )
        commit.add_argument(
            "-y", "--yes", action="store_true", help="Commit the first candidate"
        )

        sub.add_parser("status", aliases=["st"], help="Show change summary")

        cfg = sub.add_parser("config", help="Show or change configuration")
        cfg.add_argument("-s", "--show", action="store_true")
        cfg.add_argument("-r", "--reset", action="store_true")
        cfg.add_argument("--path", action="store_true", help="Print config path")
        cfg.add_argument("--list-models", action="store_true")
        cfg.add_argument("--set-provider", choices=sorted(DEFAULT_MODELS))
        cfg.add_argument("--set-api-key")
        cfg.add_argument("--set-model")
        cfg.add_argument("--set-language", choices=SUPPORTED_LANGUAGES)
        cfg.add_argument("--set-style", choices=SUPPORTED_STYLES)
        cfg.add_argument("--set-max-tokens", type=int)
        cfg.add_argument("--set-temperature", type=float)
        return parser

    def run(self, args: Optional[list[str]] = None) -> int:
        argv = list(sys.argv[1:] if args is None else args)
        try:
            parsed = self.parser.parse_args(argv)
            if parsed.command is None:
                # Bare `gac` behaves like `gac commit`
                parsed = self.parser.parse_args(argv + ["commit"])
        except SystemExit as exc:
            return int(exc.code or 0)

        logging.basicConfig(
            level=logging.DEBUG if parsed.debug else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        handlers = {
            "generate": self._cmd_generate,
            "gen": self._cmd_generate,
            "commit": self._cmd_commit,
            "c": self._cmd_commit,
            "status": self._cmd_status,
            "st": self._cmd_status,
            "config": self._cmd_config,
        }
        try:
            return handlers[parsed.command](parsed)
        except ConfigError as exc:
            print(f"{RED}Configuration error: {exc}{RESET}", file=sys.stderr)
            return 2
        except BackendError as exc:
            print(
                f"{RED}Generation failed ({exc.kind.value}): {exc}{RESET}",
                file=sys.stderr,
            )
            return 1
        except GacError as exc:
            print(f"{RED}{exc}{RESET}", file=sys.stderr)
            return 1

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _workflow(self, parsed: argparse.Namespace) -> GitAutoCommitWorkflow:
        config = load_config()
        return GitAutoCommitWorkflow(config, repo_path=parsed.repo_path)

    def _require_backend(self, workflow: GitAutoCommitWorkflow, quiet: bool) -> bool:
        if not workflow.config.is_configured():
            raise ConfigError(
                f"No API key configured for {workflow.config.provider}. "
                "Run 'gac config --set-api-key KEY'."
            )
        if workflow.validate_backend():
            return True
        if not quiet:
            print(
                f"{RED}API key invalid or provider unreachable; "
                f"check 'gac config --show'{RESET}",
                file=sys.stderr,
            )
        return False

    def _cmd_generate(self, parsed: argparse.Namespace) -> int:
        workflow = self._workflow(parsed)
        if parsed.hook:
            try:
                if not self._require_backend(workflow, quiet=True):
                    return 1
                message = workflow.generate_one()
            except GacError:
                return 1
            if not message:
                return 1
            print(message)
            return 0

        if not self._require_backend(workflow, quiet=False):
            return 1
        if parsed.multiple:
            messages = workflow.generate_many(parsed.count)
            if not messages:
                print(f"{YELLOW}No Git changes detected{RESET}")
                return 1
            print(f"{CYAN}Generated commit message options:{RESET}")
            for idx, message in enumerate(messages, 1):
                print(f"{DIM}{idx}.{RESET} {message}")
            return 0

        message = workflow.generate_one()
        if not message:
            print(f"{YELLOW}No Git changes detected{RESET}")
            return 1
        print(f"{CYAN}Generated commit message:{RESET}")
        print(message)
        return 0

    def _cmd_commit(self, parsed: argparse.Namespace) -> int:
        workflow = self._workflow(parsed)
        if parsed.message:
            workflow.commit(parsed.message)
            print(f"{GREEN}Committed: {parsed.message}{RESET}")
            return 0

        if not self._require_backend(workflow, quiet=False):
            return 1
        candidates = workflow.generate_many(parsed.count)
        if not candidates:
            print(f"{YELLOW}No Git changes detected{RESET}")
            return 1

        message = self._choose(candidates, parsed.pick, parsed.yes)
        if message is None:
            print(f"{DIM}Commit cancelled{RESET}")
            return 1
        workflow.commit(message)
        print(f"{GREEN}Committed: {message}{RESET}")
        return 0

    def _choose(
        self, candidates: list[str], pick: Optional[int], assume_yes: bool
    ) -> Optional[str]:
        if pick is not None:
            if not 1 <= pick <= len(candidates):
                raise ValidationError(
                    f"--pick must be between 1 and {len(candidates)}, got {pick}"
                )
            return candidates[pick - 1]
        if assume_yes:
            return candidates[0]

        print(f"{CYAN}Commit message options:{RESET}")
        for idx, candidate in enumerate(candidates, 1):
            print(f"{DIM}{idx}.{RESET} {candidate}")
        try:
            answer = self._input(
                f"Choose 1-{len(candidates)}, Enter for 1, q to cancel: "
            ).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None
        if answer.lower() in {"q", "n", "no"}:
            return None
        if not answer:
            return candidates[0]
        try:
            choice = int(answer)
        except ValueError:
            raise ValidationError(f"Not a number: {answer!r}") from None
        if not 1 <= choice <= len(candidates):
            raise ValidationError(
                f"Choice must be between 1 and {len(candidates)}, got {choice}"
            )
        return candidates[choice - 1]

    def _cmd_status(self, parsed: argparse.Namespace) -> int:
        workflow = self._workflow(parsed)
        summary = workflow.status_summary()
        if summary is None:
            raise GitError("Current directory is not a Git repository")

        header = f"{CYAN}{BOLD}Git status summary{RESET}"
        if summary.branch:
            header += f" {DIM}({summary.branch}){RESET}"
        print(header)
        print(f"\n{BOLD}Changed files:{RESET}")
        for entry in summary.entries:
            code = entry.working_dir if entry.working_dir != " " else entry.index
            colour = _STATUS_COLOURS.get(code, "")
            print(f"  {colour}{entry.code} {entry.path}{RESET}")

        stats = summary.analysis.stats
        print(f"\n{BOLD}Statistics:{RESET}")
        print(f"  Files changed: {stats.files_changed}")
        print(f"  Lines added: {GREEN}{stats.additions}{RESET}")
        print(f"  Lines deleted: {RED}{stats.deletions}{RESET}")
        print(f"  Change type: {summary.analysis.type}")
        if summary.analysis.scope:
            print(f"  Scope: {summary.analysis.scope}")
        return 0

    def _cmd_config(self, parsed: argparse.Namespace) -> int:
        if parsed.path:
            print(config_file_path())
            return 0
        if parsed.reset:
            reset_config()
            print(f"{GREEN}Configuration reset{RESET}")
            return 0

        config = load_config()
        if parsed.list_models:
            for model in model_options(config.provider):
                marker = "*" if model == config.model else " "
                print(f"{marker} {model}")
            return 0

        changes = {
            "provider": parsed.set_provider,
            "api_key": parsed.set_api_key,
            "model": parsed.set_model,
            "language": parsed.set_language,
            "style": parsed.set_style,
            "max_tokens": parsed.set_max_tokens,
            "temperature": parsed.set_temperature,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        if changes:
            config = update_config(config, **changes)
            path = save_config(config)
            print(f"{GREEN}Configuration saved to {path}{RESET}")
            for key in changes:
                value = "(hidden)" if key == "api_key" else getattr(config, key)
                print(f"  {key}: {value}")
            return 0

        self._print_config(config)
        return 0

    @staticmethod
    def _print_config(config: Config) -> None:
        print(f"{CYAN}Current configuration:{RESET}")
        print(json.dumps(config.redacted(), indent=2, ensure_ascii=False))


def main(argv: Optional[list[str]] = None) -> int:
    return CLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
