"""Suite-level aggregation of feature results."""

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from feature_results.errors import FeatureError
from feature_results.feature_result import FeatureResult

log = logging.getLogger(__name__)

SEPARATOR = "=" * 57


@dataclass(kw_only=True, eq=False)
class SuiteResult:
    """Results of every feature in one run, merged for suite-wide reporting."""

    _feature_results: list[FeatureResult] = field(init=False, default_factory=list)
    _lock: threading.Lock = field(
        init=False, repr=False, default_factory=threading.Lock
    )

    def add_feature_result(self, feature_result: FeatureResult) -> None:
        with self._lock:
            self._feature_results.append(feature_result)
        log.info(
            "Feature completed: %s scenarios=%d failed=%d",
            feature_result.call_name,
            feature_result.scenario_count,
            feature_result.failed_count,
        )

    @property
    def feature_results(self) -> Sequence[FeatureResult]:
        with self._lock:
            return tuple(self._feature_results)

    @property
    def feature_count(self) -> int:
        return len(self.feature_results)

    @property
    def scenario_count(self) -> int:
        return sum(fr.scenario_count for fr in self.feature_results)

    @property
    def failed_count(self) -> int:
        return sum(fr.failed_count for fr in self.feature_results)

    @property
    def duration_millis(self) -> float:
        return sum(fr.duration_millis for fr in self.feature_results)

    @property
    def failed_features(self) -> Sequence[FeatureResult]:
        return [fr for fr in self.feature_results if fr.is_failed]

    @property
    def errors(self) -> Sequence[tuple[FeatureResult, FeatureError]]:
        """Combined error of each failed feature, paired with its result.

        Features sharing a call name each keep their own entry.
        """
        errors: list[tuple[FeatureResult, FeatureError]] = []
        for feature_result in self.failed_features:
            if (error := feature_result.combined_error()) is not None:
                errors.append((feature_result, error))
        return errors

    @property
    def exit_code(self) -> int:
        return 1 if self.failed_count else 0

    def to_list(self) -> list[dict[str, Any]]:
        """Report maps of all features, the root of a cucumber JSON report."""
        return [fr.to_map() for fr in self.feature_results]

    def print_stats(self) -> None:
        """Print the suite summary and the failures of each failed feature."""
        scenario_count = self.scenario_count
        failed_count = self.failed_count
        lines = [
            SEPARATOR,
            "features: %5d | failed: %4d"
            % (self.feature_count, len(self.failed_features)),
            "scenarios: %4d | passed: %4d | failed: %4d | time: %.4f"
            % (
                scenario_count,
                scenario_count - failed_count,
                failed_count,
                self.duration_millis / 1000,
            ),
            SEPARATOR,
        ]
        for feature_result, error in self.errors:
            lines.append(f"failed feature: {feature_result.call_name}")
            lines.append(str(error))
        print("\n".join(lines))
