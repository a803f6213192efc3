"""
Basic usage - Select a bucket and list it
"""
import asyncio
from s3fspy import S3FileSystem, S3Config


async def main():
    # S3_ENDPOINT / AWS_REGION come from the environment, credentials from botocore
    async with S3FileSystem(config=S3Config.from_env()) as fs:

        # Buckets are root folders
        for bucket in await fs.list_buckets():
            print(bucket.url)

        folder = await fs.set_current_folder("s3://my-bucket")
        print(f"\nFiles in {folder.url}:")
        for entry in await fs.list_files():
            print(f"  {entry.relative_path} ({entry.size} bytes)")


if __name__ == "__main__":
    asyncio.run(main())
