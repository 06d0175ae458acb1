import sys
import os
import io
import zipfile
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import web.app as web_app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(web_app, 'REPORT_PATH', tmp_path / 'report.json')
    web_app.app.config['TESTING'] = True
    with web_app.app.test_client() as client:
        yield client


@pytest.fixture
def project(tmp_path):
    root = tmp_path / 'site'
    root.mkdir()
    (root / 'style.css').write_text('.card {}\n.stale {}\n', encoding='utf-8')
    (root / 'index.html').write_text('<div class="card"></div>', encoding='utf-8')
    return root


def test_index_page(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'<form' in response.data


def test_analyze_directory(client, project):
    response = client.post('/analyze', json={'directory': str(project)})
    assert response.status_code == 200
    data = response.get_json()
    assert data['total_classes'] == 2
    assert [c['name'] for c in data['unused_classes']] == ['stale']
    assert data['report_url'] == '/download/report'

    download = client.get('/download/report')
    assert download.status_code == 200
    assert b'"stale"' in download.data


def test_analyze_requires_directory(client):
    response = client.post('/analyze', json={})
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_analyze_missing_directory(client, tmp_path):
    response = client.post('/analyze', json={'directory': str(tmp_path / 'nope')})
    assert response.status_code == 404


def test_analyze_invalid_config(client, project):
    (project / 'tag-finder.toml').write_text('[scan]\nmax_workers = "many"\n', encoding='utf-8')
    response = client.post('/analyze', json={'directory': str(project)})
    assert response.status_code == 400


def test_find_word(client, project):
    response = client.post('/find-word', json={'word': 'stale', 'directory': str(project)})
    assert response.status_code == 200
    data = response.get_json()
    assert data['found'] and data['is_css_only']
    assert data['css_files'] == [str(project / 'style.css')]
    assert data['warnings'] == []

    data = client.post('/find-word', json={'word': 'card', 'directory': str(project)}).get_json()
    assert not data['is_css_only']
    assert data['other_files'] == [str(project / 'index.html')]


def test_find_word_rejects_empty_word(client, project):
    response = client.post('/find-word', json={'word': '  ', 'directory': str(project)})
    assert response.status_code == 400


def test_download_without_report(client):
    assert client.get('/download/report').status_code == 404


def zipped_project():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        zf.writestr('site/main.scss', '.hero {}\n.orphan {}\n')
        zf.writestr('site/app.js', "el.className = 'hero'")
    buffer.seek(0)
    return buffer


def test_analyze_zip(client):
    response = client.post(
        '/analyze_zip',
        data={'project_zip': (zipped_project(), 'site.zip')},
        content_type='multipart/form-data'
    )
    assert response.status_code == 200
    data = response.get_json()
    assert [c['name'] for c in data['unused_classes']] == ['orphan']
    assert [c['name'] for c in data['used_classes']] == ['hero']


def test_analyze_zip_requires_file(client):
    assert client.post('/analyze_zip', data={}, content_type='multipart/form-data').status_code == 400


def test_analyze_zip_rejects_other_extensions(client):
    response = client.post(
        '/analyze_zip',
        data={'project_zip': (io.BytesIO(b'hi'), 'site.tar')},
        content_type='multipart/form-data'
    )
    assert response.status_code == 400


def test_analyze_zip_rejects_corrupt_archive(client):
    response = client.post(
        '/analyze_zip',
        data={'project_zip': (io.BytesIO(b'not a zip'), 'site.zip')},
        content_type='multipart/form-data'
    )
    assert response.status_code == 400
