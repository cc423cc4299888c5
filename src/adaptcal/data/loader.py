"""Load weight and calorie histories from CSV files."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from adaptcal.tracking.models import EnergyLogSample, WeightSample


class HistoryLoader:
    """Reads weight and calorie log CSVs into engine samples.

    Weight CSV format:
        date,weight_kg
        2025-01-15,82.4

    Calorie log CSV format (calories_burned optional):
        date,calories_consumed,calories_burned
        2025-01-15,2150,320

    When a date appears more than once, the last row for that date wins.
    Rows with an unparsable date are skipped.
    """

    WEIGHT_COLUMNS = ["date", "weight_kg"]
    LOG_COLUMNS = ["date", "calories_consumed"]

    @staticmethod
    def _read(csv_path: Path, required: list[str]) -> pd.DataFrame:
        df = pd.read_csv(csv_path)

        missing = set(required) - set(df.columns)
        if missing:
            raise ValueError(
                f"Missing required columns in {csv_path.name}: {sorted(missing)}. "
                f"Required columns are: {required}"
            )

        df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.date
        df = df.dropna(subset=["date"])
        return df.drop_duplicates(subset="date", keep="last")

    def load_weights(self, csv_path: Path) -> list[WeightSample]:
        """Load weigh-ins from a CSV file.

        Raises:
            ValueError: If required columns are missing
        """
        df = self._read(csv_path, self.WEIGHT_COLUMNS)
        weights = pd.to_numeric(df["weight_kg"], errors="coerce")

        return [
            WeightSample(date=day, weight_kg=float(weight))
            for day, weight in zip(df["date"], weights)
        ]

    @staticmethod
    def _calorie_column(df: pd.DataFrame, column: str) -> pd.Series:
        if column not in df.columns:
            return pd.Series(0, index=df.index)
        values = pd.to_numeric(df[column], errors="coerce")
        return values.replace([np.inf, -np.inf], np.nan).fillna(0)

    def load_logs(self, csv_path: Path) -> list[EnergyLogSample]:
        """Load daily calorie logs from a CSV file.

        Missing or non-numeric calorie cells, including infinities, load as 0.

        Raises:
            ValueError: If required columns are missing
        """
        df = self._read(csv_path, self.LOG_COLUMNS)
        consumed = self._calorie_column(df, "calories_consumed")
        burned = self._calorie_column(df, "calories_burned")

        return [
            EnergyLogSample(date=day, calories_consumed=int(c), calories_burned=int(b))
            for day, c, b in zip(df["date"], consumed, burned)
        ]
