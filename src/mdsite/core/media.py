"""Media copying plus ffmpeg-generated video thumbnails and audio waveforms"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from mdsite.config import Settings
from mdsite.core.utils.slug import slugify


log = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {'.mp4', '.webm', '.mov'}
AUDIO_EXTENSIONS = {'.mp3', '.wav', '.ogg', '.m4a'}
WAVEFORM_FILTER = 'showwavespic=s=640x200:colors=#4f46e5|#818cf8'


@dataclass
class MediaResult:
    media_url:     str = ''
    thumbnail_url: str = ''


def media_url(settings: Settings, filename: str) -> str:
    return f"{settings.base_path}/media/{filename}"


def _run_ffmpeg(args: list[str], settings: Settings) -> bool:
    """Run ffmpeg with args; False on non-zero exit, timeout, or missing binary."""
    cmd = [settings.ffmpeg_path, '-y', *args]
    try:
        subprocess.run(cmd, capture_output=True, check=True, timeout=settings.ffmpeg_timeout)
    except subprocess.CalledProcessError as e:
        log.debug("ffmpeg exited %s: %s", e.returncode, (e.stderr or b'').decode(errors='replace').strip())
        return False
    except subprocess.TimeoutExpired:
        log.warning("ffmpeg timed out after %ss", settings.ffmpeg_timeout)
        return False
    except FileNotFoundError:
        log.warning("ffmpeg not found at %s", settings.ffmpeg_path)
        return False
    return True


def generate_video_thumbnail(video: Path, out: Path, settings: Settings) -> bool:
    """Grab a 640px-wide frame at 1s, retrying from the first frame for short clips."""
    scale = ['-vframes', '1', '-vf', 'scale=640:-1', str(out)]
    if _run_ffmpeg(['-i', str(video), '-ss', '00:00:01', *scale], settings):
        log.info("Generated thumbnail: %s", out.name)
        return True
    if _run_ffmpeg(['-i', str(video), *scale], settings):
        log.info("Generated thumbnail (first frame): %s", out.name)
        return True
    log.warning("Could not generate thumbnail for %s", video)
    return False


def generate_audio_waveform(audio: Path, out: Path, settings: Settings) -> bool:
    """Render a 640x200 waveform image of audio."""
    if _run_ffmpeg(['-i', str(audio), '-filter_complex', WAVEFORM_FILTER, '-frames:v', '1', str(out)], settings):
        log.info("Generated waveform: %s", out.name)
        return True
    log.warning("Could not generate waveform for %s", audio)
    return False


def make_preview(source: Path, title: str, kind: str, settings: Settings) -> str:
    """Generate a thumbnail (video) or waveform (music) into the media dir; return its URL or ''."""
    media_dir = Path(settings.output_dir) / 'media'
    media_dir.mkdir(parents=True, exist_ok=True)
    ext = source.suffix.lower()
    if kind == 'video' and ext in VIDEO_EXTENSIONS:
        name = f"{slugify(title)}-thumb.jpg"
        ok = generate_video_thumbnail(source, media_dir / name, settings)
    elif kind == 'music' and ext in AUDIO_EXTENSIONS:
        name = f"{slugify(title)}-waveform.png"
        ok = generate_audio_waveform(source, media_dir / name, settings)
    else:
        return ''
    return media_url(settings, name) if ok else ''


def copy_media(src: Path, title: str, kind: str, settings: Settings) -> MediaResult:
    """Copy src into {output_dir}/media/ named after the title and build its preview.

    Images are their own thumbnail. Copy errors are logged and yield empty URLs.
    """
    dest_dir = Path(settings.output_dir) / 'media'
    filename = f"{slugify(title)}{src.suffix.lower()}"
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest_dir / filename)
    except OSError as e:
        log.warning("Error copying media %s: %s", src, e)
        return MediaResult()
    log.info("Copied: %s", filename)

    url = media_url(settings, filename)
    if kind == 'image':
        return MediaResult(media_url=url, thumbnail_url=url)
    return MediaResult(media_url=url, thumbnail_url=make_preview(dest_dir / filename, title, kind, settings))


def resolve_deployed(url: str, title: str, kind: str, settings: Settings) -> MediaResult:
    """Handle a '/'-rooted url that points at a file already in the output dir."""
    rel = url[len(settings.base_path):] if settings.base_path and url.startswith(settings.base_path) else url
    existing = Path(settings.output_dir) / rel.lstrip('/')
    if not existing.exists():
        log.warning("Media file not found: %s", existing)
        return MediaResult()
    return MediaResult(media_url=url, thumbnail_url=make_preview(existing, title, kind, settings))
