#!/usr/bin/env python3
"""
Validation script for the YAUS URL shortener.
Exercises a live running instance to check that shortening and redirects work.
"""

import argparse
import sys
import time
from datetime import datetime
from typing import Optional

import requests


class ServiceValidator:
    """Validates URL shortener service functionality."""

    def __init__(self, base_url: str = "http://localhost:8080", timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.test_results = []

    def print_header(self, text: str):
        """Print a formatted header."""
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        """Print test result."""
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"{status} - {name}")
        if details:
            print(f"       {details}")

    def test_shorten(self, url: str) -> Optional[str]:
        """POST /shorten and return the key."""
        try:
            response = self.session.post(
                f"{self.base_url}/shorten",
                json={"url": url},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.print_test("Shorten URL", False, f"Error: {e}")
            return None

        key = response.json().get("hash") if response.status_code == 200 else None
        self.print_test(
            "Shorten URL",
            key is not None,
            f"Key: {key}" if key else f"Status: {response.status_code}",
        )
        return key

    def test_idempotent_shorten(self, url: str, key: str) -> bool:
        """Shortening the same URL again yields the same key."""
        try:
            response = self.session.post(
                f"{self.base_url}/shorten",
                json={"url": url},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.print_test("Deterministic Key", False, f"Error: {e}")
            return False

        same = response.status_code == 200 and response.json().get("hash") == key
        self.print_test("Deterministic Key", same, f"Status: {response.status_code}")
        return same

    def test_redirect(self, key: str, url: str) -> bool:
        """GET /{key} answers 307 with the original URL."""
        try:
            response = self.session.get(
                f"{self.base_url}/{key}",
                allow_redirects=False,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.print_test("Redirect", False, f"Error: {e}")
            return False

        location = response.headers.get("Location", "")
        passed = response.status_code == 307 and location == url
        self.print_test(
            "Redirect",
            passed,
            f"Status: {response.status_code}, Location: {location or 'none'}",
        )
        return passed

    def test_unknown_key(self) -> bool:
        """GET on a key never written answers 404."""
        try:
            response = self.session.get(
                f"{self.base_url}/unknown-{int(time.time())}",
                allow_redirects=False,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.print_test("Unknown Key", False, f"Error: {e}")
            return False

        is_not_found = response.status_code == 404
        self.print_test(
            "Unknown Key",
            is_not_found,
            f"Status: {response.status_code} (expected 404)",
        )
        return is_not_found

    def test_invalid_body(self) -> bool:
        """POST /shorten with a malformed body answers 400."""
        try:
            response = self.session.post(
                f"{self.base_url}/shorten",
                data="{not json",
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.print_test("Invalid Body", False, f"Error: {e}")
            return False

        is_rejected = response.status_code == 400
        self.print_test(
            "Invalid Body",
            is_rejected,
            f"Status: {response.status_code} (expected 400)",
        )
        return is_rejected

    def run_all_tests(self) -> bool:
        """Run all validation tests."""
        self.print_header("YAUS Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        url = f"https://example.com/validate/{int(time.time())}"
        key = self.test_shorten(url)
        if key is None:
            print(f"\nShorten failed. Make sure the service is accessible at {self.base_url}")
            self.print_summary()
            return False

        self.test_idempotent_shorten(url, key)
        self.test_redirect(key, url)
        self.test_unknown_key()
        self.test_invalid_body()

        self.print_summary()
        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        """Print test summary."""
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"Passed:       {passed}")
        print(f"Failed:       {failed}")

        if failed > 0:
            print("\nFailed tests:")
            for name, ok in self.test_results:
                if not ok:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate a running YAUS instance"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8080",
        help="Base URL of the service (default: http://localhost:8080)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Per-request timeout in seconds (default: 5)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url, timeout=args.timeout)

    try:
        success = validator.run_all_tests()
    except KeyboardInterrupt:
        print("\n\nValidation interrupted by user")
        sys.exit(2)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
