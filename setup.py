#!/usr/bin/env python3
"""
Setup script for the hand gesture event stream
"""

from setuptools import setup, find_packages

REQUIREMENTS = [
    "opencv-python>=4.5",
    "numpy>=1.21",
    "PyYAML>=6.0",
]

setup(
    name="gesture-stream",
    version="0.1.0",
    description="Webcam hand gestures to a debounced stream of gesture events",
    packages=find_packages(include=["gesture_stream", "gesture_stream.*"]),
    python_requires=">=3.8",
    install_requires=REQUIREMENTS,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "gesture-stream=gesture_stream.main:main",
        ],
    },
)
