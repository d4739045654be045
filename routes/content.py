#!/usr/bin/env python3
"""
Content route handlers: playback, video details, live now, search, pictures
"""

from bottle import HTTPResponse, request, response

from .errors import error_payload


def setup_content_routes(app, client, service):
    """Setup content-related routes"""

    def fail(err):
        status, body = error_payload(err, request.path)
        response.status = status
        return body

    @app.route("/api/content/<content_id:int>")
    def get_content_video(content_id):
        try:
            return client.content_video(content_id).to_dict()
        except Exception as err:
            return fail(err)

    @app.route("/api/content/<content_id:int>/play")
    def play_content(content_id):
        channel_id = request.query.get("channel_id")
        platform = request.query.get("platform") or None

        try:
            result = client.content_play(
                content_id,
                channel_id=int(channel_id) if channel_id else None,
                platform=platform,
            )
        except ValueError as val_err:
            response.status = 400
            return {"error": str(val_err)}
        except Exception as err:
            return fail(err)

        return result.raw

    @app.route("/api/live-now")
    def get_live_now():
        try:
            return client.live_now().raw
        except Exception as err:
            return fail(err)

    @app.route("/api/search/vod")
    def search_vod():
        params = {key: request.query.get(key) for key in request.query.keys()}
        try:
            return client.search_vod(params).raw
        except Exception as err:
            return fail(err)

    @app.route("/api/picture/<slug:path>")
    def get_picture(slug):
        try:
            width = int(request.query.get("width", 640))
            height = int(request.query.get("height", 360))
        except ValueError:
            response.status = 400
            return {"error": "width and height must be integers"}

        try:
            picture = client.picture(
                slug,
                width,
                height,
                quality=request.query.get("q") or None,
                orientation=request.query.get("o") or None,
                fallback=request.query.get("fallback") == "true",
            )
        except Exception as err:
            return fail(err)

        return HTTPResponse(
            body=picture.content,
            status=200,
            headers={"Content-Type": picture.content_type or "application/octet-stream"},
        )
