"""
Navigation - Move the current folder around a bucket
"""
import asyncio
from s3fspy import S3FileSystem, S3Config, InvalidAction


async def main():
    async with S3FileSystem(config=S3Config.from_env()) as fs:
        await fs.set_current_folder("s3://my-bucket/reports", create_bucket=True)

        # Enter and leave subfolders
        print(fs.push_folder("2024").url)    # s3://my-bucket/reports/2024/
        print(fs.push_folder("q1").url)      # s3://my-bucket/reports/2024/q1/
        print(fs.pop_folder().url)           # s3://my-bucket/reports/2024/

        # Jump within the bucket (no server round trip)
        print(fs.set_current_path("archive/old").url)

        # Subfolders are the common prefixes one level down
        fs.set_current_path("")
        for folder in await fs.list_subfolders():
            print(f"[DIR] {folder.name}")

        # Recursive listing
        for entry in await fs.list_files(include_sub_folders=True):
            print(f"  {entry.file.path}")

        try:
            fs.pop_folder()
        except InvalidAction:
            print("Already at bucket root")


if __name__ == "__main__":
    asyncio.run(main())
