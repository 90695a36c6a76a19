from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent
README = (ROOT / "README.md").read_text(encoding="utf-8") if (ROOT / "README.md").exists() else ""

setup(
    name="rktensor",
    version="0.1.0",
    description="Convert RGB images into flat model-input tensor buffers (u8, f32, quantized; CHW/HWC)",
    long_description=README,
    long_description_content_type="text/markdown",
    author="rktensor Contributors",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.22",
        "Pillow>=8.0.0",
    ],
    extras_require={
        "yaml": [
            "PyYAML>=6.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
        "all": [
            "rktensor[yaml,dev]",
        ],
    },
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Scientific/Engineering :: Image Recognition",
    ],
    keywords=[
        "tensor",
        "image-processing",
        "preprocessing",
        "quantization",
        "machine-learning",
    ],
    entry_points={
        "console_scripts": [
            "rktensor-inspect=rktensor.cli:main",
        ],
    },
)
