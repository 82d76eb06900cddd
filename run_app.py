import uvicorn


def main() -> None:
    """Run the GeoIP2 geocoder API with uvicorn."""
    uvicorn.run(
        "geoip2_geocoder.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
