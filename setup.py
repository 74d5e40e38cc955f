from setuptools import setup, find_packages

setup(
    name="netznoe-smartmeter",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.24",
        "pandas>=1.5",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    description="Client for the Netz NOE smart-meter portal: accounts, metering points and consumption data.",
    author="chriscoveyduck",
    author_email="",
    include_package_data=True,
)
