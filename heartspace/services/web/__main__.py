"""Entry point for: python3 -m heartspace.services.web"""
import asyncio

from heartspace.services.web.api import HeartSpaceService


def main():
    service = HeartSpaceService()
    asyncio.run(service.run())


if __name__ == "__main__":
    main()
