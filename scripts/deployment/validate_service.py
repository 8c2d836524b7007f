#!/usr/bin/env python3
"""
Validation script for URL Shortener service.
Exercises a running instance end to end: shorten, redirect, counter, errors.
"""

import sys
import time
import requests
from typing import Optional
from datetime import datetime


class ServiceValidator:
    """Validates URL shortener service functionality."""

    def __init__(self, base_url: str = "http://localhost:3000"):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.test_results = []

    def print_header(self, text: str):
        """Print a formatted header."""
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        """Print test result."""
        status = "✅ PASS" if passed else "❌ FAIL"
        self.test_results.append((name, passed))
        print(f"{status} - {name}")
        if details:
            print(f"       {details}")

    def shorten(self, payload: dict) -> requests.Response:
        return self.session.post(f"{self.base_url}/api/v1", json=payload, timeout=5)

    def visits(self) -> Optional[int]:
        response = self.session.get(f"{self.base_url}/api/v1/stats", timeout=5)
        if response.status_code != 200:
            return None
        return response.json().get("visits")

    def test_health_check(self) -> bool:
        """Test health check endpoint."""
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            if response.status_code == 200:
                data = response.json()
                is_healthy = data.get("status") == "healthy"
                details = f"Mappings: {data.get('mapping_store')}, Counter: {data.get('counter_store')}"
                self.print_test("Health Check", is_healthy, details)
                return is_healthy
            else:
                self.print_test("Health Check", False, f"Status: {response.status_code}")
                return False
        except requests.RequestException as e:
            self.print_test("Health Check", False, f"Error: {str(e)}")
            return False

    def test_create_short_url(self) -> Optional[str]:
        """Test creating a short URL."""
        try:
            test_url = f"https://example.com/test/{int(time.time())}"
            response = self.shorten({"url": test_url})

            if response.status_code == 200:
                data = response.json()
                short_code = data.get("short_code")
                if short_code:
                    self.print_test("Create Short URL", True, f"Code: {short_code}, URL: {data.get('short')}")
                    return short_code

            self.print_test("Create Short URL", False, f"Status: {response.status_code}")
            return None
        except requests.RequestException as e:
            self.print_test("Create Short URL", False, f"Error: {str(e)}")
            return None

    def test_get_url_info(self, short_code: str) -> bool:
        """Test getting URL information."""
        try:
            response = self.session.get(f"{self.base_url}/api/v1/urls/{short_code}", timeout=5)

            if response.status_code == 200:
                data = response.json()
                has_required_fields = all(
                    key in data for key in ["short_code", "original_url", "short_url"]
                )
                details = f"TTL: {data.get('ttl_seconds') or 'none'}"
                self.print_test("Get URL Info", has_required_fields, details)
                return has_required_fields
            else:
                self.print_test("Get URL Info", False, f"Status: {response.status_code}")
                return False
        except requests.RequestException as e:
            self.print_test("Get URL Info", False, f"Error: {str(e)}")
            return False

    def test_redirect(self, short_code: str) -> bool:
        """Test 301 redirect and that the visit counter moves."""
        try:
            before = self.visits()
            response = self.session.get(
                f"{self.base_url}/{short_code}",
                allow_redirects=False,
                timeout=5
            )

            is_redirect = response.status_code == 301
            location = response.headers.get("Location", "")
            self.print_test(
                "URL Redirect",
                is_redirect,
                f"Redirects to: {location[:50]}..." if location else "No Location header"
            )

            # Counter increment runs after the response is sent
            time.sleep(0.2)
            after = self.visits()
            counted = before is not None and after is not None and after > before
            self.print_test("Visit Counter", counted, f"Visits: {before} -> {after}")

            return is_redirect and counted
        except requests.RequestException as e:
            self.print_test("URL Redirect", False, f"Error: {str(e)}")
            return False

    def test_duplicate_custom_code(self) -> bool:
        """Test custom short code creation and duplicate rejection."""
        try:
            custom_code = f"test{int(time.time())}"
            first = self.shorten({"url": "https://github.com/example/repo", "short": custom_code})
            if first.status_code != 200 or first.json().get("short_code") != custom_code:
                self.print_test("Custom Short Code", False, f"Status: {first.status_code}")
                return False
            self.print_test("Custom Short Code", True, f"Code: {custom_code}")

            second = self.shorten({"url": "https://different-url.com", "short": custom_code})
            is_conflict = second.status_code == 409
            self.print_test(
                "Duplicate Code Rejection",
                is_conflict,
                f"Status: {second.status_code} (expected 409)"
            )
            return is_conflict
        except requests.RequestException as e:
            self.print_test("Duplicate Code Rejection", False, f"Error: {str(e)}")
            return False

    def test_invalid_url(self) -> bool:
        """Test invalid URL rejection."""
        try:
            response = self.shorten({"url": "not-a-valid-url"})

            is_rejected = response.status_code == 400
            self.print_test(
                "Invalid URL Rejection",
                is_rejected,
                f"Status: {response.status_code} (expected 400)"
            )
            return is_rejected
        except requests.RequestException as e:
            self.print_test("Invalid URL Rejection", False, f"Error: {str(e)}")
            return False

    def test_nonexistent_code(self) -> bool:
        """Test resolving a short code that was never stored."""
        try:
            response = self.session.get(
                f"{self.base_url}/nonexistent999",
                allow_redirects=False,
                timeout=5
            )

            is_not_found = (
                response.status_code == 404 and
                response.json() == {"error": "short not found on database"}
            )
            self.print_test(
                "Non-existent Code",
                is_not_found,
                f"Status: {response.status_code} (expected 404)"
            )
            return is_not_found
        except (requests.RequestException, ValueError) as e:
            self.print_test("Non-existent Code", False, f"Error: {str(e)}")
            return False

    def run_all_tests(self) -> bool:
        """Run all validation tests."""
        self.print_header("URL Shortener Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_health_check():
            print("\n❌ Health check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        print()

        short_code = self.test_create_short_url()
        if short_code:
            self.test_get_url_info(short_code)
            self.test_redirect(short_code)

        print()

        self.test_duplicate_custom_code()
        self.test_invalid_url()
        self.test_nonexistent_code()

        self.print_summary()

        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        """Print test summary."""
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"✅ Passed:     {passed}")
        print(f"❌ Failed:     {failed}")
        print(f"Success Rate: {(passed/total*100):.1f}%")

        if failed > 0:
            print("\n⚠️  Failed tests:")
            for name, passed in self.test_results:
                if not passed:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Validate URL Shortener service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:3000",
        help="Base URL of the service (default: http://localhost:3000)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\n⚠️  Validation interrupted by user")
        sys.exit(2)


if __name__ == "__main__":
    main()
