import asyncio
import json

from mcp.shared.memory import create_connected_server_and_client_session
from pydantic import AnyUrl

from todolist.mcp_server import create_mcp_server


def call_tools(use_case, *calls):
    """
    Run the given (tool, arguments) calls in order through one in-memory client session.
    """

    async def _run():
        server = create_mcp_server(use_case)
        async with create_connected_server_and_client_session(server._mcp_server) as session:
            return [await session.call_tool(name, args) for name, args in calls]

    return asyncio.run(_run())


def text_of(result) -> str:
    return result.content[0].text


def json_of(result) -> dict:
    assert not result.isError, text_of(result)
    return json.loads(text_of(result))


class TestDiscovery:
    def test_lists_every_tool(self, use_case):
        async def _run():
            server = create_mcp_server(use_case)
            async with create_connected_server_and_client_session(server._mcp_server) as session:
                return await session.list_tools()

        names = {tool.name for tool in asyncio.run(_run()).tools}
        assert names == {
            "create_task",
            "get_task",
            "list_tasks",
            "update_task",
            "delete_task",
            "count_all_tasks",
            "count_done_tasks",
            "count_undone_tasks",
        }

    def test_schema_resource_and_prompt(self, use_case):
        async def _run():
            server = create_mcp_server(use_case)
            async with create_connected_server_and_client_session(server._mcp_server) as session:
                resource = await session.read_resource(AnyUrl("schema://todolist"))
                prompt = await session.get_prompt("review_tasks")
                return resource, prompt

        resource, prompt = asyncio.run(_run())
        assert "CREATE TABLE todolist" in resource.contents[0].text
        assert "list_tasks" in prompt.messages[0].content.text


class TestTools:
    def test_create_get_and_list(self, use_case):
        created, listed = call_tools(
            use_case,
            ("create_task", {"title": "Buy groceries", "description": "Milk, eggs, and bread"}),
            ("list_tasks", {}),
        )
        todo = json_of(created)
        assert todo["title"] == "Buy groceries"
        assert todo["is_done"] is False

        (fetched,) = call_tools(use_case, ("get_task", {"id": todo["id"]}))
        assert json_of(fetched) == todo

        body = json_of(listed)
        assert body["count"] == 1
        assert body["tasks"] == [todo]

    def test_update_and_counts(self, use_case):
        (created,) = call_tools(use_case, ("create_task", {"title": "Walk", "description": "Around the park"}))
        todo_id = json_of(created)["id"]

        updated, all_count, done, undone = call_tools(
            use_case,
            ("update_task", {"id": todo_id, "is_done": True}),
            ("count_all_tasks", {}),
            ("count_done_tasks", {}),
            ("count_undone_tasks", {}),
        )
        todo = json_of(updated)
        assert todo["is_done"] is True
        assert todo["title"] == "Walk"
        assert text_of(all_count) == "Task have: 1 items"
        assert text_of(done) == "You have 1 tasks, mark as done"
        assert text_of(undone) == "You have 0 tasks, mark as undone"

    def test_delete(self, use_case):
        (created,) = call_tools(use_case, ("create_task", {"title": "Temp", "description": "Remove me"}))
        todo_id = json_of(created)["id"]

        deleted, missing = call_tools(use_case, ("delete_task", {"id": todo_id}), ("get_task", {"id": todo_id}))
        assert not deleted.isError
        assert text_of(deleted) == "Task delete successful!!!"
        assert missing.isError
        assert f"Failed to get todo by id: {todo_id}" in text_of(missing)

    def test_errors_keep_the_session_open(self, use_case):
        missing_update, missing_delete, empty_title, count = call_tools(
            use_case,
            ("update_task", {"id": 404, "title": "Nope"}),
            ("delete_task", {"id": 404}),
            ("create_task", {"title": "  ", "description": "No title"}),
            ("count_all_tasks", {}),
        )
        assert missing_update.isError
        assert "Failed to update the task" in text_of(missing_update)
        assert missing_delete.isError
        assert "Failed to delete task id: 404" in text_of(missing_delete)
        assert empty_title.isError
        assert text_of(count) == "Task have: 0 items"

    def test_id_outside_integer_range_is_an_error_result(self, use_case):
        (result,) = call_tools(use_case, ("get_task", {"id": 2**63}))
        assert result.isError


def test_both_transports_share_one_store(client, use_case):
    res = client.post("/v1/todo", json={"title": "From HTTP", "description": "Created over HTTP"})
    http_todo = res.json()["data"]

    fetched, created = call_tools(
        use_case,
        ("get_task", {"id": http_todo["id"]}),
        ("create_task", {"title": "From MCP", "description": "Created over MCP", "is_done": True}),
    )
    assert json_of(fetched) == http_todo
    mcp_todo = json_of(created)

    res_get = client.get(f"/v1/todo/{mcp_todo['id']}")
    assert res_get.json()["data"] == mcp_todo
    assert client.get("/v1/todo/done").json()["count"] == 1
    assert client.get("/v1/todo/undone").json()["count"] == 1
