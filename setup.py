from setuptools import setup, find_packages

# Use find_packages to automatically discover all packages
packages = find_packages(include=["zignormal", "zignormal.*"])

setup(
    name="zignormal",
    version="0.1.0",
    packages=packages,
    package_data={
        "zignormal": ["cli/*.yaml"],
    },
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "matplotlib",
        "tqdm",
        "pyyaml",
        "typer",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "zig=zignormal.cli.zig:main",
        ],
    },
)
