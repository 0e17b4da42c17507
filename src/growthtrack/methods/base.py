"""
Base detector class for measurement plausibility checks.
"""

from abc import ABC, abstractmethod
import pandas as pd
from typing import Dict


class BaseDetector(ABC):
    """
    Abstract base class for measurement detectors.

    A detector flags implausible entries in measurement columns of a history
    DataFrame. Subclasses implement `detect` and `validate_config`; the base
    class provides the shared column check.

    Example subclass implementation:
        class PositiveDetector(BaseDetector):
            def validate_config(self) -> None:
                pass

            def detect(self, df: pd.DataFrame, columns: list[str]) -> Dict[str, pd.Series]:
                return {col: df[col] <= 0 for col in columns}
    """

    @abstractmethod
    def detect(self, df: pd.DataFrame, columns: list[str]) -> Dict[str, pd.Series]:
        """
        Flag implausible values in the specified columns of the DataFrame.

        Args:
            df: Measurement history.
            columns: Column names to check.

        Returns:
            Dictionary mapping column names to boolean Series, True where implausible.
        """
        pass

    @abstractmethod
    def validate_config(self) -> None:
        """
        Validate detector-specific configuration.

        Raises:
            ValueError: If configuration is invalid.
        """
        pass

    def _validate_column(self, df: pd.DataFrame, column: str) -> None:
        """
        Validate that a column exists in the DataFrame.

        Raises:
            ValueError: If column does not exist.
        """
        if column not in df.columns:
            raise ValueError(f"Column '{column}' does not exist in DataFrame")
