from setuptools import setup

setup(
    name="seismic_sources",
    version="0.1.0",
    packages=["seismic_sources", "seismic_sources.scripts"],
    package_data={"seismic_sources": ["defaults.yaml"]},
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "numpy",
        "pandas",
        "pyproj",
        "pyyaml",
        "schema",
        "scipy",
        "shapely>=2.0",
        "typer",
    ],
    extras_require={"test": ["hypothesis", "pytest"]},
    entry_points={
        "console_scripts": [
            "point-source-ruptures=seismic_sources.scripts.point_source_ruptures:main",
        ]
    },
    zip_safe=False,
)
