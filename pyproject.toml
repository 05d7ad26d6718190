[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tagkit"
version = "0.1.0"
description = "Geometry, rigid-body math, homographies and grayscale raster images for fiducial tag processing"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["fiducial", "homography", "quaternion", "polygon", "image", "pgm", "geometry", "pose"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Recognition",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tagkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
