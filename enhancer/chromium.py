"""Utilities for driving headless Chromium."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional


class ChromiumCommandBuilder:
    """Builder for constructing Chromium command arguments.

    Every invocation gets its own user data directory so runs never share
    cookies, cache or singleton locks.
    """

    def __init__(
        self,
        chromium_bin: str,
        user_data_dir: Path,
        *,
        user_agent: Optional[str] = None,
    ):
        self.chromium_bin = chromium_bin
        self.user_data_dir = user_data_dir
        self.user_agent = user_agent

    def build_base_args(self, *, incognito: bool = False) -> List[str]:
        """Build common base arguments for all Chromium invocations."""
        args = [
            self.chromium_bin,
            "--headless=new",
            f"--user-data-dir={self.user_data_dir}",
            "--no-sandbox",
            "--disable-gpu",
            "--disable-software-rasterizer",
            "--disable-dev-shm-usage",
            "--disable-setuid-sandbox",
            "--no-first-run",
        ]
        if self.user_agent:
            args.append(f"--user-agent={self.user_agent}")
        if incognito:
            args.append("--incognito")
        return args

    def build_dump_dom_args(self, url: str, *, virtual_time_budget_ms: int = 9000) -> List[str]:
        """Arguments that load ``url`` and print the rendered DOM to stdout.

        The virtual time budget lets scripts populate the page before the
        DOM is serialised.
        """
        return self.build_base_args(incognito=True) + [
            "--dump-dom",
            "--run-all-compositor-stages-before-draw",
            f"--virtual-time-budget={virtual_time_budget_ms}",
            "--hide-scrollbars",
            url,
        ]
