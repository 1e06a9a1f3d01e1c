[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imagepro"
version = "0.1.0"
description = "Point, region, morphology, geometric and warping operations on PGM, PPM, RAW and BMP images"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "image-processing",
    "convolution",
    "edge-detection",
    "morphology",
    "histogram-equalization",
    "bilinear-interpolation",
    "warping",
    "morphing",
    "pgm",
    "ppm",
    "bmp",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
imagepro = "imagepro.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["imagepro"]

[tool.pytest.ini_options]
addopts = "-ra"
