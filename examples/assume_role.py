"""Exchange long-lived credentials for a role's temporary credentials."""

import os

from xac_provider import ExchangeError, ProviderError, configure_provider


def main():
    """Assume a role and use the temporary credentials."""
    values = {
        "region": os.environ.get("TENCENTCLOUD_REGION", "ap-guangzhou"),
        "assume_role": {
            "role_arn": os.environ.get(
                "TENCENTCLOUD_ASSUME_ROLE_ARN", "qcs::cam::uin/100000000001:roleName/deployer"
            ),
            "session_name": "xac-example",
            # 0 means TENCENTCLOUD_ASSUME_ROLE_SESSION_DURATION, or 7200
            "session_duration": 0,
            "policy": '{"version":"2.0","statement":[{"effect":"allow","action":["cos:GetObject"],"resource":["*"]}]}',
        },
    }

    try:
        handle = configure_provider(values)
    except ExchangeError as e:
        print(f"AssumeRole failed: {e}")
        return
    except ProviderError as e:
        print(f"Configuration error: {e}")
        return

    credential = handle.credential
    print(f"Temporary credential {credential.masked_id()} (temporary: {credential.is_temporary})")
    handle.close()


if __name__ == "__main__":
    main()
