import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="ensure-initialized",
    version="0.1.0",
    author="Maximilian Schmidt",
    author_email="ga97lul@in.tum.de",
    description="Awaitable readiness signals for objects with asynchronous initialization",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Framework :: AsyncIO",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    package_data={"ensure_initialized.util": ["logging_config.yaml"]},
    python_requires=">=3.10",
    install_requires=['codestare-async-utils',
                      'PyYAML >= 5.4',
                      ],
    extras_require={
        'test': ['pytest >= 7.0',
                 'pytest-asyncio >= 0.21',
                 ],
    },
)
