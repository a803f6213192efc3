"""
File operations - Write, read, copy, tag and delete
"""
import asyncio
from s3fspy import S3FileSystem, S3Config, S3File, WriteFileAttributes


async def main():
    async with S3FileSystem(config=S3Config.from_env()) as fs:
        await fs.set_current_folder("s3://my-bucket/docs", create_bucket=True)

        # Write with attributes
        await fs.write_file(
            "hello.txt",
            b"Hello, S3!",
            WriteFileAttributes(content_type="text/plain", tags={"project": "demo"})
        )

        # Read it back
        print((await fs.read_file("hello.txt")).decode())

        # HEAD attributes
        attributes = await fs.get_file_attributes("hello.txt")
        print(f"Size: {attributes.size}, type: {attributes.content_type}")

        # Copy to an absolute location
        backup = await fs.copy_file("hello.txt", S3File("my-bucket", "backup/hello.txt"))
        print(f"Copied to {backup.url}")

        # Tags and ACL
        await fs.set_file_tagging("hello.txt", {"project": "demo", "reviewed": "yes"})
        print(await fs.get_file_tagging("hello.txt"))
        await fs.set_file_acl("hello.txt", "private")

        # Local files
        uploaded = await fs.upload_file("README.md")
        path = await fs.download_file(uploaded, "/tmp/README.copy.md")
        print(f"Downloaded to {path}")

        await fs.delete_file("hello.txt")


if __name__ == "__main__":
    asyncio.run(main())
