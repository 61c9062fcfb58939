"""
CCTV GIS Backend
Setup script for the cctv_gis package

Camera catalog reads over PostGIS and anonymised viewer telemetry
exposed as Prometheus metrics.
"""

from setuptools import setup, find_packages

setup(
    name="cctv-gis-backend",
    version="0.1.0",
    description="Camera catalog and viewer telemetry backend for a CCTV map",
    author="CCTV GIS Platform",
    python_requires=">=3.9",
    package_dir={"": "backend"},
    packages=find_packages("backend", exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "SQLAlchemy[asyncio]>=2.0.0",
        "asyncpg>=0.29.0",
        "GeoAlchemy2>=0.14.0",
        "alembic>=1.13.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "loguru>=0.7.0",
        "prometheus-client>=0.19.0",
        "geoip2>=4.7.0",
        "maxminddb>=2.5.0",
        "user-agents>=2.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cctv-gis-backend=cctv_gis.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
