# demo_folders_with_items.py
# Version: v1
#
# Demo: print the metric and attribute folder trees of a project.
#
# Usage:
#
#   export GDC_MOCK_MODE=1        # or GDC_USERNAME / GDC_PASSWORD / GDC_PROJECT_ID
#   python demo_folders_with_items.py

import asyncio
from typing import Any, Dict

from gdc_sdk.tools import tasks


async def main() -> None:
    for folder_type in ("metric", "attribute"):
        print(f"Calling MCP task: folders_with_items(type={folder_type!r})")
        result: Dict[str, Any] = await tasks.folders_with_items(type=folder_type)

        for folder in result["folders"]:
            print(f"- {folder['title']}")
            for item in folder["items"]:
                print(f"    {item['name']}  ({item['uri']})")


if __name__ == "__main__":
    asyncio.run(main())
