import asyncio
import argparse
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _client(args):
    from chub import ChubClient

    return ChubClient(search_url=args.search_url, host_url=args.host_url)


def _settings(args):
    from chub import SettingsStore

    return SettingsStore(args.data_dir / "settings.json")


def cmd_search(args):
    """검색 실행"""
    from chub import CharacterSearch, ConsoleNotifier

    raw = {
        "search_term": args.query,
        "name_like": args.name,
        "include_tags": args.tags,
        "exclude_tags": args.exclude_tags,
        "inclusive_or": args.inclusive_or,
        "nsfw": args.nsfw,
        "nsfl": args.nsfl,
        "min_tokens": args.min_tokens,
        "max_tokens": args.max_tokens,
        "language": args.language,
        "sort_field": args.sort,
        "sort_ascending": args.asc,
        "page_size": args.first,
        "page_number": args.page,
    }

    async def run():
        async with _client(args) as client:
            searcher = CharacterSearch(client, ConsoleNotifier(), _settings(args))
            return await searcher.search(raw, remember=args.remember)

    records = asyncio.run(run())

    print(f"\n검색 결과: {len(records)}개 (페이지 {args.page})\n")
    for i, record in enumerate(records, 1):
        print(f"[{i}] {record.name}")
        print(f"    제작자: {record.author}")
        print(f"    태그: {', '.join(record.tags[:8])}")
        print(f"    경로: {record.full_path}")
        print(f"    링크: {record.page_url}")
        print()


def cmd_import(args):
    """캐릭터 가져오기"""
    from chub import CharacterDownloader, ConsoleNotifier, ContentKind, DirectoryIngestor

    async def run():
        async with _client(args) as client:
            downloader = CharacterDownloader(
                client,
                ConsoleNotifier(),
                {ContentKind.CHARACTER: DirectoryIngestor(args.output or args.data_dir / "imports")},
            )
            return await downloader.download(args.full_path)

    file = asyncio.run(run())
    if file:
        print(f"✅ 가져오기 완료: {file.filename} ({len(file.content)} bytes)")


def cmd_avatar(args):
    """아바타 이미지 저장"""

    async def run():
        async with _client(args) as client:
            return await client.fetch_avatar(args.full_path)

    data = asyncio.run(run())
    if data is None:
        print(f"⚠️  아바타를 가져오지 못했습니다: {args.full_path}")
        return

    output = args.output or Path(args.full_path.replace("/", "_") + ".webp")
    output.write_bytes(data)
    print(f"✅ 저장: {output} ({len(data)} bytes)")


def cmd_settings(args):
    """저장된 검색 설정 조회/변경"""
    settings = _settings(args)

    for item in args.set or []:
        key, _, value = item.partition("=")
        try:
            settings[key] = json.loads(value)
        except json.JSONDecodeError:
            settings[key] = value
    if args.set:
        settings.save()

    print(json.dumps(settings.data, ensure_ascii=False, indent=2))


def cmd_serve(args):
    """API 서버 실행"""
    import uvicorn
    from api.app import create_app

    app = create_app(data_dir=args.data_dir, search_url=args.search_url, host_url=args.host_url)
    uvicorn.run(app, host=args.host, port=args.port)


def cmd_ui(args):
    """Gradio UI 실행"""
    from ui.app import create_ui

    app = create_ui(data_dir=args.data_dir, search_url=args.search_url, host_url=args.host_url)
    app.launch(server_name="0.0.0.0", server_port=args.port, share=args.share)


def main():
    parser = argparse.ArgumentParser(description="Chub 캐릭터 검색/가져오기")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path(os.getenv("CHUB_DATA_DIR", "data")),
        help="설정/가져오기 파일 저장 디렉토리",
    )
    parser.add_argument(
        "--search-url",
        type=str,
        default=os.getenv("CHUB_SEARCH_URL"),
        help="Chub 검색 엔드포인트",
    )
    parser.add_argument(
        "--host-url",
        type=str,
        default=os.getenv("HOST_URL"),
        help="가져오기를 처리할 호스트 주소",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="디버그 로그 출력",
    )

    subparsers = parser.add_subparsers(dest="command", help="실행할 명령")

    # search 명령
    search_parser = subparsers.add_parser("search", help="캐릭터 검색")
    search_parser.add_argument("query", type=str, nargs="?", default="", help="검색어")
    search_parser.add_argument("--name", type=str, default="", help="이름 포함")
    search_parser.add_argument("--tags", type=str, default="", help="포함 태그 (쉼표 구분)")
    search_parser.add_argument("--exclude-tags", type=str, default="", help="제외 태그 (쉼표 구분)")
    search_parser.add_argument(
        "--or",
        dest="inclusive_or",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="태그 OR 조건",
    )
    search_parser.add_argument("--nsfw", action=argparse.BooleanOptionalAction, default=None)
    search_parser.add_argument("--nsfl", action=argparse.BooleanOptionalAction, default=None)
    search_parser.add_argument("--min-tokens", type=str, default=None, help="최소 토큰 수")
    search_parser.add_argument("--max-tokens", type=str, default=None, help="최대 토큰 수")
    search_parser.add_argument("--language", type=str, default="", help="언어 코드 (en, ja 등)")
    search_parser.add_argument("--sort", type=str, default="download_count", help="정렬 기준")
    search_parser.add_argument("--asc", action="store_true", help="오름차순")
    search_parser.add_argument("--first", type=int, default=None, help="페이지 크기")
    search_parser.add_argument("--page", type=int, default=1, help="페이지 번호")
    search_parser.add_argument(
        "--remember",
        action="store_true",
        help="이번 검색의 플래그/페이지 크기를 설정에 저장",
    )

    # import 명령
    import_parser = subparsers.add_parser("import", help="캐릭터 가져오기")
    import_parser.add_argument("full_path", type=str, help="캐릭터 경로 (author/slug)")
    import_parser.add_argument("-o", "--output", type=Path, default=None, help="저장 디렉토리")

    # avatar 명령
    avatar_parser = subparsers.add_parser("avatar", help="아바타 이미지 저장")
    avatar_parser.add_argument("full_path", type=str, help="캐릭터 경로 (author/slug)")
    avatar_parser.add_argument("-o", "--output", type=Path, default=None, help="저장 파일")

    # settings 명령
    settings_parser = subparsers.add_parser("settings", help="검색 설정 조회/변경")
    settings_parser.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="설정 변경 (예: --set nsfw=true --set findCount=50)",
    )

    # serve 명령
    serve_parser = subparsers.add_parser("serve", help="API 서버 실행")
    serve_parser.add_argument("--host", type=str, default="0.0.0.0", help="호스트 주소")
    serve_parser.add_argument("--port", type=int, default=8001, help="포트 번호")

    # ui 명령
    ui_parser = subparsers.add_parser("ui", help="Gradio UI 실행")
    ui_parser.add_argument("--port", type=int, default=7860, help="포트 번호")
    ui_parser.add_argument("--share", action="store_true", help="Gradio 공유 링크 생성")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "search":
        cmd_search(args)
    elif args.command == "import":
        cmd_import(args)
    elif args.command == "avatar":
        cmd_avatar(args)
    elif args.command == "settings":
        cmd_settings(args)
    elif args.command == "serve":
        cmd_serve(args)
    elif args.command == "ui":
        cmd_ui(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
