"""Visualization components for paging simulation results."""

from pagesim.visualizer.base import BaseVisualizer
from pagesim.visualizer.terminal import TerminalVisualizer
from pagesim.visualizer.html import HTMLVisualizer

__all__ = [
    "BaseVisualizer",
    "TerminalVisualizer",
    "HTMLVisualizer",
]
