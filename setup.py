from setuptools import setup, find_packages

setup(
    name="polyvem",
    version="0.1.0",
    description="Virtual Element Method for the Poisson equation on polygonal meshes",
    author="polyvem Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.12",
        "meshio>=5.0",
    ],
    extras_require={
        "dev": ["pytest>=6.0"],
        "docs": ["sphinx>=5.0", "sphinx_rtd_theme>=1.0"],
    },
)
