from setuptools import setup, find_packages

setup(
    name="hotbuild",
    version="0.1.0",
    description="Watch a project, rebuild it on change and restart the built application",
    author="Hotbuild Team",
    packages=find_packages(include=["hotbuild", "hotbuild.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "watchdog>=2.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "hotbuild=hotbuild.main:main",
        ],
    },
)
