#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: setup.py
# AI-SUMMARY: 项目安装配置文件

"""
Loop Slicer 项目安装配置
"""

from setuptools import setup, find_packages

# 读取README文件
def read_readme():
    with open("README.md", "r", encoding="utf-8") as f:
        return f.read()

# 读取requirements文件
def read_requirements():
    with open("requirements.txt", "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="loop-slicer",
    version="0.3.0",
    description="Loop slicer - chop recorded loops by tempo grid, beat count or silence gaps",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    author="BDM Team",
    author_email="bdm@example.com",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    include_package_data=True,
    package_data={
        "loop_slicer": ["config.yaml"],
    },
    install_requires=read_requirements(),
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "black",
            "flake8",
        ],
        "test": [
            "pytest>=6.0",
            "pytest-cov",
        ]
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Multimedia :: Sound/Audio :: Analysis",
    ],
    keywords="audio, loop, slicing, sampler, wav",
)
