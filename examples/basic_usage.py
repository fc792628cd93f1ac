"""Basic usage examples for the xac provider."""

from xac_provider import ConfigurationError, configure_provider, provider


def main():
    """Configure the provider from TENCENTCLOUD_* environment variables."""

    print("xac Provider Examples")
    print("=" * 50)

    # Example 1: Credentials and region from the environment
    print("\n1. Configure from environment:")
    try:
        handle = configure_provider()
    except ConfigurationError as e:
        print(f"Set TENCENTCLOUD_SECRET_ID, TENCENTCLOUD_SECRET_KEY and TENCENTCLOUD_REGION first: {e}")
        return

    print(f"Region:    {handle.region}")
    print(f"Endpoint:  {handle.endpoint('cvm')}")
    print(f"Secret ID: {handle.credential.masked_id()}")

    # Example 2: A service client built on the shared handle
    print("\n2. Describe regions:")
    cvm = handle.client("cvm", "2017-03-12")
    response = cvm.call("DescribeRegions")
    for region in response.get("RegionSet", []):
        print(f"  - {region['Region']}: {region['RegionName']}")

    # Example 3: Provider catalog
    print("\n3. Provider catalog:")
    description = provider().describe()
    for name in description["resources"]:
        print(f"  resource    {name}")
    for name in description["data_sources"]:
        print(f"  data source {name}")

    handle.close()


if __name__ == "__main__":
    main()
