from setuptools import setup, find_packages

setup(
    name="vxg-k3s-infra",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "k3sinfra.bootstrap": ["*.sh"],
    },
    install_requires=[
        "boto3>=1.26.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "vxg-k3s=k3sinfra.cli:main",
        ],
    },
    python_requires=">=3.8",
    description="Idempotent provisioning of a k3s demo cluster with monitoring on AWS EC2",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
