"""
Session management - Keep the current folder between runs
"""
import asyncio
from s3fspy import S3FileSystem, S3Config, NavigationState, SQLiteSession, SessionData


async def main():
    config = S3Config.from_env()
    session = SQLiteSession("my_profile")

    # Restore the folder saved by a previous run
    saved = session.load()
    folder = saved.folder if saved and saved.matches(config.endpoint_url, config.region) else None

    async with S3FileSystem(config=config, navigation=NavigationState(folder)) as fs:
        if fs.current_folder is None:
            await fs.set_current_folder("s3://my-bucket")
        fs.push_folder("logs")
        print(f"Now in {fs.current_folder.url}")

        session.save(SessionData(
            current_folder=fs.current_folder.url,
            endpoint_url=config.endpoint_url,
            region=config.region,
        ))

    session.close()


if __name__ == "__main__":
    asyncio.run(main())
