"""
Injected overlay scripts. Every dynamic value arrives through `arguments`;
nothing is formatted into the source.
"""

ID_PREFIX = "recplay_"

# arguments: idPrefix
CLEAR_DRAWINGS = r"""
var elements = window.document.body.querySelectorAll('[id*="' + arguments[0] + '"]');
for (var i = 0; i < elements.length; i++) {
  elements[i].remove();
}
window.recplayTooltipSymbol = 9311;
window.recplayTooltipLastPos = { x: 0, y: 0 };
"""

# arguments: fromElement, toElement, id
DRAW_ARROW = r"""
var rect1 = arguments[0].getBoundingClientRect();
var rect2 = arguments[1].getBoundingClientRect();
var from = {y: rect1.top};
var to = {y: rect2.top};
if (rect1.left > rect2.left) {
  from.x = rect1.left; to.x = rect2.right;
} else if (rect1.left < rect2.left) {
  from.x = rect1.right; to.x = rect2.left;
} else {
  from.x = rect1.left; to.x = rect2.left;
}
var canvas = document.createElement('canvas');
canvas.id = arguments[2];
canvas.style.left = "0px";
canvas.style.top = "0px";
canvas.width = window.innerWidth;
canvas.height = window.innerHeight;
canvas.style.zIndex = '100000';
canvas.style.position = "absolute";
document.body.appendChild(canvas);
var headlen = 10;
var angle = Math.atan2(to.y - from.y, to.x - from.x);
var ctx = canvas.getContext("2d");
ctx.beginPath();
ctx.moveTo(from.x, from.y);
ctx.lineTo(to.x, to.y);
ctx.lineWidth = 3;
ctx.strokeStyle = '#f00';
ctx.stroke();
ctx.beginPath();
ctx.moveTo(to.x, to.y);
ctx.lineTo(to.x - headlen * Math.cos(angle - Math.PI/7), to.y - headlen * Math.sin(angle - Math.PI/7));
ctx.lineTo(to.x - headlen * Math.cos(angle + Math.PI/7), to.y - headlen * Math.sin(angle + Math.PI/7));
ctx.lineTo(to.x, to.y);
ctx.lineTo(to.x - headlen * Math.cos(angle - Math.PI/7), to.y - headlen * Math.sin(angle - Math.PI/7));
ctx.lineWidth = 3;
ctx.strokeStyle = '#f00';
ctx.stroke();
"""

# arguments: id, color, x, y, width, height
DRAW_COLOR_FILL = r"""
var colorfill = window.document.createElement('div');
colorfill.id = arguments[0];
colorfill.style.backgroundColor = arguments[1];
colorfill.style.border = 'none';
colorfill.style.display = 'block';
colorfill.style.left = arguments[2] + 'px';
colorfill.style.top = arguments[3] + 'px';
colorfill.style.width = arguments[4] + 'px';
colorfill.style.height = arguments[5] + 'px';
colorfill.style.margin = '0px';
colorfill.style.padding = '0px';
colorfill.style.position = 'absolute';
colorfill.style.zIndex = '99999';
window.document.body.appendChild(colorfill);
"""

# arguments: element, attributeName, offsetX, offsetY, fromLastPos, drawSymbol, symbolId, tooltipId
DRAW_FLYOVER = r"""
var element = arguments[0];
var offsetX = arguments[2], offsetY = arguments[3];
var fromLastPos = arguments[4], drawSymbol = arguments[5];
if (!window.recplayTooltipSymbol) {
  window.recplayTooltipSymbol = 9311;
}
if (!window.recplayTooltipLastPos) {
  window.recplayTooltipLastPos = { x: 0, y: 0 };
}
var rect = element.getBoundingClientRect();
var title = element.getAttribute(arguments[1]) || 'N/A';
var left = window.scrollX + rect.left;
var top = window.scrollY + rect.top;
if (drawSymbol) {
  window.recplayTooltipSymbol++;
  var symbol = document.createElement('div');
  symbol.id = arguments[6];
  symbol.textContent = String.fromCharCode(window.recplayTooltipSymbol);
  symbol.style.color = '#f00';
  symbol.style.display = 'block';
  symbol.style.fontSize = '12px';
  symbol.style.left = (left - 12) + 'px';
  symbol.style.position = 'absolute';
  symbol.style.top = top + 'px';
  symbol.style.zIndex = '99999';
  document.body.appendChild(symbol);
}
var tooltip = document.createElement('div');
tooltip.id = arguments[7];
tooltip.textContent = drawSymbol ?
  String.fromCharCode(window.recplayTooltipSymbol) + " " + title : title;
tooltip.style.position = 'absolute';
tooltip.style.color = '#000';
tooltip.style.backgroundColor = '#F5FCDE';
tooltip.style.border = '3px solid #f00';
tooltip.style.fontSize = '12px';
tooltip.style.zIndex = '99999';
tooltip.style.display = 'block';
tooltip.style.height = '16px';
tooltip.style.padding = '2px';
tooltip.style.verticalAlign = 'middle';
tooltip.style.top = (fromLastPos ? window.recplayTooltipLastPos.y : (top + offsetY)) + 'px';
tooltip.style.left = (fromLastPos ? window.recplayTooltipLastPos.x : (left + offsetX)) + 'px';
document.body.appendChild(tooltip);
if (tooltip.scrollHeight > tooltip.offsetHeight) {
  tooltip.style.height = (tooltip.scrollHeight + 3) + 'px';
}
var lastPos = tooltip.getBoundingClientRect();
window.recplayTooltipLastPos = {
  x: window.scrollX + lastPos.left, y: window.scrollY + lastPos.bottom
};
"""

# arguments: id, x, y, width, height, padTop, padRight, padBottom, padLeft
DRAW_REDMARK = r"""
var redmark = window.document.createElement('div');
redmark.id = arguments[0];
redmark.style.border = '3px solid red';
redmark.style.display = 'block';
redmark.style.left = (arguments[1] - 4 - arguments[8]) + 'px';
redmark.style.top = (arguments[2] - 4 - arguments[5]) + 'px';
redmark.style.width = (arguments[3] + 8 + arguments[6]) + 'px';
redmark.style.height = (arguments[4] + 8 + arguments[7]) + 'px';
redmark.style.margin = '0px';
redmark.style.padding = '0px';
redmark.style.position = 'absolute';
redmark.style.zIndex = '99999';
window.document.body.appendChild(redmark);
"""

# arguments: selectElement, id, offsetX, offsetY
DRAW_SELECT = r"""
var element = arguments[0];
var rect = element.getBoundingClientRect();
var x = rect.left;
var y = rect.bottom;
var width = element.offsetWidth;
function escape(str) {
  return str.replace(
    /[\x26\x0A<>'"]/g,
    function(r) { return "&#" + r.charCodeAt(0) + ";"; }
  );
}
var content = "";
for (var i = 0; i < element.length; i++) {
  if (!element.options[i].disabled) {
    content += escape(element.options[i].text) + "<br />";
  }
}
var dropdown = document.createElement('div');
dropdown.id = arguments[1];
dropdown.innerHTML = content;
dropdown.style.backgroundColor = '#fff';
dropdown.style.border = '1px solid #000';
dropdown.style.color = '#000';
dropdown.style.display = 'block';
dropdown.style.fontSize = '12px';
dropdown.style.height = '1px';
dropdown.style.padding = '2px';
dropdown.style.position = 'absolute';
dropdown.style.width = width + 'px';
dropdown.style.zIndex = '99999';
document.body.appendChild(dropdown);
dropdown.style.height = (dropdown.scrollHeight + 8) + 'px';
if (dropdown.scrollWidth > width) {
  dropdown.style.width = (dropdown.scrollWidth + 8) + 'px';
}
dropdown.style.left = (x + arguments[2]) + "px";
dropdown.style.top = (y + arguments[3]) + "px";
"""

# arguments: id, text, color, fontSize, x, y, height, top, right
DRAW_TEXT = r"""
var textbox = window.document.createElement('div');
textbox.id = arguments[0];
textbox.innerText = arguments[1];
textbox.style.border = 'none';
textbox.style.color = arguments[2];
textbox.style.display = 'block';
textbox.style.font = arguments[3] + 'px Verdana, sans-serif';
textbox.style.left = arguments[4] + 'px';
textbox.style.margin = '0';
textbox.style.padding = '0';
textbox.style.position = 'absolute';
textbox.style.right = arguments[8] + 'px';
textbox.style.top = (arguments[5] + arguments[6] + arguments[7]) + 'px';
textbox.style.zIndex = '99999';
window.document.body.appendChild(textbox);
"""
