from setuptools import setup, find_packages

setup(
    name="socket_wfc",
    version="0.1.0",
    description="Wave Function Collapse over tiles with matching edge sockets",
    packages=find_packages(include=["socket_wfc", "socket_wfc.*"]),
    install_requires=[
        "numpy",
        "pygame",
        "PyYAML",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "socket-wfc=socket_wfc.run:main",
        ],
    },
    python_requires=">=3.8",
)
