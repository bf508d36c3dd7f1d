"""Configuration settings for the ingest pipeline."""

from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def data_root() -> Path:
    return project_root() / "data"


def raw_co2_dir() -> Path:
    return data_root() / "raw" / "co2_mlo"


def co2_cache_path() -> Path:
    return raw_co2_dir() / "co2_mm_mlo.csv"
