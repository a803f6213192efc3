"""
Signed URLs - Share files without credentials
"""
import asyncio
from s3fspy import S3FileSystem, S3Config


async def main():
    config = S3Config.from_env(default_expires=3600)

    async with S3FileSystem(config=config) as fs:
        await fs.set_current_folder("s3://my-bucket/shared")

        # Download link, default lifetime from the config
        print(await fs.read_file_url("report.pdf"))

        # Upload link valid for 5 minutes
        print(await fs.write_file_url("incoming/upload.bin", expires=300))


if __name__ == "__main__":
    asyncio.run(main())
