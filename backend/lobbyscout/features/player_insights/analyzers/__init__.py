"""
Insight analyzers.

This package contains one analyzer module per insight kind over a shared
base class, keeping each scoring rule independently testable.
"""

from .base_analyzer import BaseInsightAnalyzer, ScoreAccumulator
from .smurf_analyzer import SmurfAnalyzer
from .otp_analyzer import OtpAnalyzer
from .elo_quemado_analyzer import EloQuemadoAnalyzer
from .low_wr_analyzer import LowWrAnalyzer
from .carried_analyzer import CarriedAnalyzer
from .tilted_analyzer import TiltedAnalyzer

__all__ = [
    "BaseInsightAnalyzer",
    "ScoreAccumulator",
    "SmurfAnalyzer",
    "OtpAnalyzer",
    "EloQuemadoAnalyzer",
    "LowWrAnalyzer",
    "CarriedAnalyzer",
    "TiltedAnalyzer",
]
