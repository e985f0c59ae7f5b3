"""
energyhub/output/writer.py

Writes compiled reports and dispatch tables to CSV files in an output directory.
"""
import logging
import os
import pandas as pd
from typing import Dict

logger = logging.getLogger(__name__)


class OutputWriter:
    """
    Writes output tables (as DataFrames) to CSV files in the output directory.
    """
    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        os.makedirs(self.output_dir, exist_ok=True)

    def write_csv(self, name: str, df: pd.DataFrame, index: bool = False) -> str:
        """Writes a DataFrame to ``<name>.csv`` in the output directory."""
        path = os.path.join(self.output_dir, f"{name}.csv")
        df.to_csv(path, index=index)
        logger.debug(f"Wrote {len(df)} rows to {path}")
        return path

    def write_multiple(self, data: Dict[str, pd.DataFrame]) -> Dict[str, str]:
        """Writes multiple DataFrames to CSV files. Returns dict of file paths."""
        return {name: self.write_csv(name, df) for name, df in data.items()}

    def write_run(self, location: str, scenario: str, report: pd.DataFrame,
                  dispatch: pd.DataFrame, capacity: pd.DataFrame) -> Dict[str, str]:
        """
        Writes the report, hourly dispatch and capacity tables of one scenario.

        Files are named ``<location>_<scenario>_{report,dispatch,capacity}.csv``;
        the dispatch table keeps its ``HOUR`` index.
        """
        stem = f"{location}_{scenario}"
        paths = {
            'report': self.write_csv(f"{stem}_report", report),
            'dispatch': self.write_csv(f"{stem}_dispatch", dispatch, index=True),
            'capacity': self.write_csv(f"{stem}_capacity", capacity),
        }
        logger.info(f"Wrote results of {stem} to {self.output_dir}")
        return paths
