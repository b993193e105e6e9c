"""
Lighthouse Report Runner

Runs Google Lighthouse via CLI to produce the raw audit reports that the
audit categorizer consumes.
"""

import json
import subprocess
from typing import Optional, Dict, Any
import logging

from pageaudit.config import settings
from pageaudit.constants import LIGHTHOUSE_CHROME_FLAGS, LIGHTHOUSE_CYCLE_ERROR

logger = logging.getLogger(__name__)

FORM_FACTORS = ("mobile", "desktop")


class LighthouseRunner:
    """Runs Lighthouse audits and returns the parsed JSON report."""

    def __init__(
        self,
        lighthouse_bin: Optional[str] = None,
        chrome_flags: Optional[list[str]] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize the Lighthouse runner.

        Args:
            lighthouse_bin: Lighthouse executable (defaults to settings.LIGHTHOUSE_BIN)
            chrome_flags: Chrome flags passed through --chrome-flags
            timeout: Timeout for one Lighthouse execution in seconds
        """
        self.lighthouse_bin = lighthouse_bin or settings.LIGHTHOUSE_BIN
        self.chrome_flags = chrome_flags or list(LIGHTHOUSE_CHROME_FLAGS)
        self.timeout = timeout or settings.LIGHTHOUSE_TIMEOUT

    def build_command(
        self, url: str, form_factor: str = "mobile", performance_only: bool = False
    ) -> list[str]:
        """Build the Lighthouse command line for a URL and form factor."""
        cmd = [self.lighthouse_bin, url]
        if performance_only:
            cmd.append("--only-categories=performance")
        elif form_factor == "desktop":
            cmd.append("--preset=desktop")
        else:
            cmd.append("--form-factor=mobile")
        cmd.extend([
            "--output=json",
            "--quiet",
            "--chrome-flags=" + " ".join(self.chrome_flags),
        ])
        return cmd

    def _execute(self, cmd: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=self.timeout,
            check=False,
        )

    def run(self, url: str, form_factor: str = "mobile") -> Optional[Dict[str, Any]]:
        """
        Run Lighthouse on a URL and return the report.

        If Lighthouse fails with a dependency-cycle error, it is retried once
        with only the performance category.

        Args:
            url: The URL to audit
            form_factor: "mobile" or "desktop"

        Returns:
            Lighthouse report dictionary, or None if the run failed
        """
        if form_factor not in FORM_FACTORS:
            raise ValueError(
                f"Unknown form factor: '{form_factor}'. Supported: {', '.join(FORM_FACTORS)}"
            )

        try:
            logger.info(f"Running Lighthouse ({form_factor}) on {url}")
            result = self._execute(self.build_command(url, form_factor))

            if result.returncode != 0 and LIGHTHOUSE_CYCLE_ERROR in (result.stderr or ""):
                logger.warning(f"Lighthouse hit a dependency cycle for {url}, retrying performance only")
                result = self._execute(
                    self.build_command(url, form_factor, performance_only=True)
                )

            if result.returncode != 0:
                logger.error(f"Lighthouse failed for {url}: {result.stderr}")
                return None

            report = json.loads(result.stdout)
            logger.info(f"Lighthouse completed successfully for {url}")
            return report

        except subprocess.TimeoutExpired:
            logger.error(f"Lighthouse timeout for {url} after {self.timeout}s")
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Lighthouse returned invalid JSON for {url}: {e}")
            return None
        except OSError as e:
            logger.error(f"Could not start Lighthouse ({self.lighthouse_bin}): {e}")
            return None

    def run_all(self, url: str) -> Dict[str, Optional[Dict[str, Any]]]:
        """Run Lighthouse for every form factor."""
        return {form_factor: self.run(url, form_factor) for form_factor in FORM_FACTORS}


def category_scores(report: Optional[Dict[str, Any]]) -> Dict[str, Optional[float]]:
    """Extract category scores (0-100) from a Lighthouse report."""
    if not report:
        return {}
    scores = {}
    for key, category in (report.get("categories") or {}).items():
        score = category.get("score") if isinstance(category, dict) else None
        scores[key] = round(score * 100, 1) if isinstance(score, (int, float)) else None
    return scores
